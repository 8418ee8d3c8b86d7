"""Drives a host batch through the request builder and dispatcher."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from .dispatcher import Dispatcher
from .errors import RecordSerializationError
from .models import DeliveryStats, Outcome
from .request_builder import RequestBuilder

logger = structlog.get_logger()

Batch = Iterable[tuple[Any, Mapping[str, Any] | None]]


class BatchProcessor:
    """Delivers each non-empty record of a batch, one at a time, in order.

    A failed record never stops the batch.  Empty and ``None`` records are
    skipped without a delivery attempt.
    """

    def __init__(self, builder: RequestBuilder, dispatcher: Dispatcher) -> None:
        self._builder = builder
        self._dispatcher = dispatcher
        self.stats = DeliveryStats()

    async def process_batch(self, tag: str, batch: Batch) -> list[Outcome]:
        """Deliver *batch* of ``(timestamp, record)`` pairs under *tag*.

        Returns one :class:`Outcome` per attempted record, in batch order.
        """
        outcomes: list[Outcome] = []
        for timestamp, record in batch:
            if not record:
                self.stats.skipped += 1
                continue

            outcome = await self._handle_record(tag, timestamp, record)
            outcomes.append(outcome)
            if outcome.success:
                self.stats.delivered += 1
                logger.debug("record_sent", tag=tag, time=timestamp)
            else:
                self.stats.failed += 1
        return outcomes

    async def _handle_record(self, tag: str, timestamp: Any, record: Mapping[str, Any]) -> Outcome:
        try:
            descriptor = self._builder.build(record)
        except RecordSerializationError as exc:
            logger.warning("record_not_serializable", tag=tag, time=timestamp, error=str(exc))
            return Outcome.failed(f"serialization failed: {exc}")
        return await self._dispatcher.send(descriptor)
