"""OutputInterface — the lifecycle a host pipeline drives an output through."""

from __future__ import annotations

import abc
from collections.abc import Callable, Mapping
from typing import Any

from .processor import Batch


class OutputInterface(abc.ABC):
    """Abstract host-facing output plugin.

    The host calls ``configure`` once with its parsed config section,
    ``start`` before the first batch, ``emit`` once per batch and
    ``shutdown`` on exit.
    """

    @abc.abstractmethod
    def configure(self, config: Mapping[str, Any]) -> None:
        """Validate *config*; invalid configuration must raise."""
        ...

    @abc.abstractmethod
    async def start(self) -> None: ...

    @abc.abstractmethod
    async def emit(self, tag: str, batch: Batch, chain: Callable[[], object]) -> None:
        """Handle one batch, then call *chain* exactly once.

        *chain* signals the host that the batch is done and must be
        called whatever happened to the individual records.
        """
        ...

    async def shutdown(self) -> None:
        """Release resources.  The default does nothing."""
        return None
