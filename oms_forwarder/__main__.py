"""Entry point: forward JSON-lines records from stdin.

Usage::

    OMS_ENDPOINT_URL=https://oms.example:443/api/records python -m oms_forwarder [tag]
"""

from __future__ import annotations

import asyncio
import sys

from pydantic import ValidationError


def main() -> None:
    from .config import ForwarderConfig
    from .runner import StdinRunner

    try:
        config = ForwarderConfig()
    except ValidationError as exc:
        print(f"Invalid configuration:\n{exc}", file=sys.stderr)
        sys.exit(2)

    tag = sys.argv[1] if len(sys.argv) > 1 else "oms.stdin"
    asyncio.run(StdinRunner(config, tag=tag).run())


if __name__ == "__main__":
    main()
