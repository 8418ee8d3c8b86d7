"""TLS context and single-use HTTP clients for mutual-TLS delivery."""

from __future__ import annotations

import ssl

import httpx

from ._version import __version__
from .models import Endpoint

USER_AGENT = f"oms-forwarder/{__version__}"

# Failures from building or using a client; InvalidURL is not an HTTPError.
TRANSPORT_ERRORS: tuple[type[Exception], ...] = (
    httpx.HTTPError,
    httpx.InvalidURL,
    ssl.SSLError,
    OSError,
)


def build_client_ssl_context(
    cert_path: str,
    key_path: str,
    *,
    verify_server_certificate: bool = False,
) -> ssl.SSLContext:
    """Return an SSL context presenting the client cert/key pair.

    With *verify_server_certificate* off (the default deployment mode) the
    peer's certificate chain and host name are not checked; the client
    still authenticates itself.  Raises :class:`ssl.SSLError` when the key
    does not match the certificate.
    """
    context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
    if not verify_server_certificate:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    context.load_cert_chain(certfile=cert_path, keyfile=key_path)
    return context


def create_client(
    endpoint: Endpoint,
    ssl_context: ssl.SSLContext,
    *,
    open_timeout_seconds: float,
    read_timeout_seconds: float,
) -> httpx.AsyncClient:
    """Build a single-use client bound to *endpoint*.

    Callers use it as an async context manager so the connection is
    closed after one exchange.
    """
    return httpx.AsyncClient(
        base_url=endpoint.base_url,
        verify=ssl_context,
        timeout=httpx.Timeout(read_timeout_seconds, connect=open_timeout_seconds),
        limits=httpx.Limits(max_connections=1, max_keepalive_connections=0),
        headers={"User-Agent": USER_AGENT},
    )
