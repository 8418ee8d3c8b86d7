"""StdinRunner — a minimal host that feeds JSON-lines records to OMSOutput."""

from __future__ import annotations

import asyncio
import json
import sys
import time
from collections.abc import AsyncIterator
from typing import Any

import structlog
import uvicorn

from .config import ForwarderConfig
from .health import create_health_app
from .logging import setup_logging
from .output import OMSOutput
from .shutdown import install_signal_handlers

logger = structlog.get_logger()


async def stdin_lines() -> AsyncIterator[str]:
    """Yield decoded lines from the process's stdin pipe."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)
    while line := await reader.readline():
        yield line.decode("utf-8", errors="replace")


class StdinRunner:
    """Reads one JSON object per line, batches them and emits to the output.

    Each record is stamped with the time it was read.  Lines that are not
    JSON objects are logged and dropped.  The runner stops at end of input
    or on SIGTERM / SIGINT, flushing the partial batch first.
    """

    def __init__(
        self,
        config: ForwarderConfig,
        *,
        tag: str = "oms.stdin",
        serve_health: bool = True,
    ) -> None:
        self.config = config
        self.tag = tag
        self.output = OMSOutput()
        self._serve_health = serve_health
        self._shutdown_event = asyncio.Event()
        self.batches_handled = 0

    # ------------------------------------------------------------------
    # Read loop
    # ------------------------------------------------------------------

    @staticmethod
    def parse_line(line: str) -> dict[str, Any] | None:
        line = line.strip()
        if not line:
            return None
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            logger.warning("input_line_invalid", error=str(exc))
            return None
        if not isinstance(record, dict):
            logger.warning("input_line_not_object", type=type(record).__name__)
            return None
        return record

    def _batch_done(self) -> None:
        self.batches_handled += 1

    async def _flush(self, batch: list[tuple[float, dict[str, Any]]]) -> None:
        if batch:
            pending = list(batch)
            batch.clear()
            await self.output.emit(self.tag, pending, self._batch_done)

    async def _run_read_loop(self, lines: AsyncIterator[str]) -> None:
        batch: list[tuple[float, dict[str, Any]]] = []
        try:
            async for line in lines:
                record = self.parse_line(line)
                if record is None:
                    continue
                batch.append((time.time(), record))
                if len(batch) >= self.config.batch_size:
                    await self._flush(batch)
        finally:
            await self._flush(batch)
            self._shutdown_event.set()

    # ------------------------------------------------------------------
    # Health server
    # ------------------------------------------------------------------

    async def _run_health_server(self) -> None:
        """Start the FastAPI health server and shut it down on signal."""
        app = create_health_app(self.output)
        config = uvicorn.Config(
            app,
            host="0.0.0.0",
            port=self.config.health_port,
            log_level="warning",
        )
        server = uvicorn.Server(config)

        serve_task = asyncio.create_task(server.serve())
        await self._shutdown_event.wait()
        server.should_exit = True
        await serve_task

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self, lines: AsyncIterator[str] | None = None) -> None:
        """Configure, start, pump input until EOF or signal, then shut down."""
        setup_logging(json=self.config.log_json, level=self.config.log_level)
        remove_handlers = install_signal_handlers(self._shutdown_event)

        self.output.configure(self.config)
        await self.output.start()

        try:
            async with asyncio.TaskGroup() as tg:
                reader = tg.create_task(self._run_read_loop(lines or stdin_lines()))
                if self._serve_health:
                    tg.create_task(self._run_health_server())
                await self._shutdown_event.wait()
                reader.cancel()
        except* Exception:
            logger.exception("runner_task_group_error")
        finally:
            remove_handlers()
            await self.output.shutdown()
            logger.info("runner_stopped", batches=self.batches_handled)
