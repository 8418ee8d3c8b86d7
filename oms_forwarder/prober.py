"""Startup liveness check against the delivery endpoint."""

from __future__ import annotations

import structlog

from .config import ForwarderConfig
from .credentials import CredentialStore
from .tls import TRANSPORT_ERRORS, create_client

logger = structlog.get_logger()


class ConnectionProber:
    """Sends ``HEAD /`` once to see whether the endpoint is reachable.

    Any HTTP answer, whatever its status, means the TLS handshake and the
    client certificate were accepted far enough to talk HTTP.  The result
    is advisory: deliveries do not consult it.
    """

    def __init__(self, config: ForwarderConfig, credentials: CredentialStore) -> None:
        self._config = config
        self._credentials = credentials
        self.last_result: bool | None = None

    async def probe(self) -> bool:
        self.last_result = await self._probe()
        return self.last_result

    async def _probe(self) -> bool:
        if not self._credentials.ensure_loaded():
            return False

        endpoint = self._config.endpoint
        try:
            async with create_client(
                endpoint,
                self._credentials.ssl_context,
                open_timeout_seconds=self._config.open_timeout_seconds,
                read_timeout_seconds=self._config.read_timeout_seconds,
            ) as client:
                response = await client.head("/")
        except TRANSPORT_ERRORS as exc:
            logger.error(
                "endpoint_unavailable",
                endpoint=endpoint.base_url,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return False

        logger.debug(
            "endpoint_verified",
            endpoint=endpoint.base_url,
            status_code=response.status_code,
        )
        return True
