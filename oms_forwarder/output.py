"""OMSOutput — wires the forwarder components behind the host lifecycle."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from typing import Any

import structlog

from .config import ForwarderConfig
from .credentials import CredentialStore
from .dispatcher import Dispatcher
from .errors import ForwarderNotConfiguredError
from .interface import OutputInterface
from .models import CredentialState, DeliveryStats, ForwarderStatus
from .processor import Batch, BatchProcessor
from .prober import ConnectionProber
from .request_builder import RequestBuilder

logger = structlog.get_logger()


class OMSOutput(OutputInterface):
    """Forward host records to the OMS endpoint over mutual TLS.

    Usage from a host::

        output = OMSOutput()
        output.configure({"endpoint_url": "https://oms.example:443/api/records"})
        await output.start()
        await output.emit("syslog", [(ts, {"msg": "hello"})], chain)
        await output.shutdown()
    """

    def __init__(self) -> None:
        self.config: ForwarderConfig | None = None
        self.status: ForwarderStatus | None = None
        self.start_time: float = time.monotonic()

        self._credentials: CredentialStore | None = None
        self._prober: ConnectionProber | None = None
        self._processor: BatchProcessor | None = None

    def configure(self, config: ForwarderConfig | Mapping[str, Any]) -> None:
        if not isinstance(config, ForwarderConfig):
            config = ForwarderConfig(**config)
        self.config = config

        self._credentials = CredentialStore(
            config.cert_path,
            config.key_path,
            verify_server_certificate=config.verify_server_certificate,
        )
        self._prober = ConnectionProber(config, self._credentials)
        self._processor = BatchProcessor(
            RequestBuilder(config.endpoint),
            Dispatcher(config, self._credentials),
        )
        self.status = ForwarderStatus.CONFIGURED

        if config.endpoint.scheme != "https":
            logger.warning("endpoint_not_tls", endpoint=str(config.endpoint))
        logger.info(
            "output_configured",
            endpoint=str(config.endpoint),
            verify_server_certificate=config.verify_server_certificate,
        )

    def _require_configured(self) -> tuple[ConnectionProber, BatchProcessor]:
        if self._prober is None or self._processor is None:
            raise ForwarderNotConfiguredError("configure() must be called first")
        return self._prober, self._processor

    # ------------------------------------------------------------------
    # Host lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        prober, _ = self._require_configured()
        self.start_time = time.monotonic()
        self.status = ForwarderStatus.RUNNING
        await prober.probe()

    async def emit(self, tag: str, batch: Batch, chain: Callable[[], object]) -> None:
        try:
            _, processor = self._require_configured()
            await processor.process_batch(tag, batch)
        finally:
            chain()

    async def shutdown(self) -> None:
        self.status = ForwarderStatus.STOPPED
        logger.info("output_stopped", stats=self.stats.model_dump())

    # ------------------------------------------------------------------
    # Introspection for the health endpoints
    # ------------------------------------------------------------------

    @property
    def credential_state(self) -> CredentialState:
        if self._credentials is None:
            return CredentialState.UNINITIALIZED
        return self._credentials.state

    @property
    def last_probe_ok(self) -> bool | None:
        return self._prober.last_result if self._prober is not None else None

    @property
    def stats(self) -> DeliveryStats:
        return self._processor.stats if self._processor is not None else DeliveryStats()
