"""Sends request descriptors over mutual TLS and classifies the result."""

from __future__ import annotations

import httpx
import structlog

from .config import ForwarderConfig
from .credentials import CredentialStore
from .models import Outcome, RequestDescriptor
from .tls import TRANSPORT_ERRORS, create_client

logger = structlog.get_logger()

NO_RESPONSE = "no response"


def summarize_response(response: httpx.Response | None) -> str:
    """``"<code> <reason> <body>"`` for a response, or ``"no response"``."""
    if response is None:
        return NO_RESPONSE
    return f"{response.status_code} {response.reason_phrase} {response.text}".rstrip()


class Dispatcher:
    """Delivers one :class:`RequestDescriptor` per call.

    Every call opens its own connection and closes it before returning;
    nothing is pooled between records.  Expected failures never raise:
    they come back as a failed :class:`Outcome` after a warning is logged.
    """

    def __init__(self, config: ForwarderConfig, credentials: CredentialStore) -> None:
        self._config = config
        self._credentials = credentials

    async def send(self, descriptor: RequestDescriptor) -> Outcome:
        if not self._credentials.ensure_loaded():
            return Outcome.failed("credentials unavailable")

        endpoint = self._config.endpoint
        headers = {"Content-Type": "application/json"} if descriptor.body else {}
        response: httpx.Response | None = None

        try:
            async with create_client(
                endpoint,
                self._credentials.ssl_context,
                open_timeout_seconds=self._config.open_timeout_seconds,
                read_timeout_seconds=self._config.read_timeout_seconds,
            ) as client:
                response = await client.request(
                    descriptor.method,
                    descriptor.path,
                    content=descriptor.body,
                    headers=headers,
                )
        except TRANSPORT_ERRORS as exc:
            logger.warning(
                "request_raised",
                method=descriptor.method,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return Outcome.failed(f"{type(exc).__name__}: {exc}")

        if response is not None and response.is_success:
            return Outcome.ok(response.status_code)

        summary = summarize_response(response)
        logger.warning(
            "request_failed",
            method=descriptor.method,
            body=descriptor.body.decode("utf-8", errors="replace"),
            endpoint=str(endpoint),
            response=summary,
        )
        return Outcome.failed(
            summary,
            status_code=response.status_code if response is not None else None,
        )
