"""Forwarder configuration loaded from the host config section or env vars.

Uses pydantic-settings so every field can be overridden via ``OMS_*``
environment variables; the host may also pass its parsed config section
as keyword arguments.
"""

from __future__ import annotations

import httpx
from pydantic import Field, PrivateAttr, field_validator, model_validator
from pydantic_settings import BaseSettings

from .models import Endpoint

DEFAULT_CERT_PATH = "/etc/opt/microsoft/omsagent/certs/oms.crt"
DEFAULT_KEY_PATH = "/etc/opt/microsoft/omsagent/certs/oms.key"

_DEFAULT_PORTS = {"https": 443, "http": 80}


def parse_endpoint(url: str) -> Endpoint:
    """Split *url* into an :class:`Endpoint`.

    Raises :class:`ValueError` for anything that is not an absolute
    http(s) URL with a host.
    """
    try:
        parsed = httpx.URL(url.strip())
    except httpx.InvalidURL as exc:
        raise ValueError(f"invalid endpoint_url {url!r}: {exc}") from exc

    if parsed.scheme not in _DEFAULT_PORTS:
        raise ValueError(
            f"endpoint_url must use https (or http for local testing), got {parsed.scheme!r}"
        )
    if not parsed.host:
        raise ValueError(f"endpoint_url has no host: {url!r}")

    return Endpoint(
        scheme=parsed.scheme,
        host=parsed.host,
        port=parsed.port or _DEFAULT_PORTS[parsed.scheme],
        path=parsed.raw_path.decode("ascii") or "/",
    )


class ForwarderConfig(BaseSettings):
    """Root configuration for a forwarder instance."""

    model_config = {"env_prefix": "OMS_", "extra": "ignore"}

    endpoint_url: str = Field(description="Full delivery URL, e.g. https://host:443/api/records")
    cert_path: str = Field(
        default=DEFAULT_CERT_PATH,
        description="PEM-encoded X.509 client certificate",
    )
    key_path: str = Field(
        default=DEFAULT_KEY_PATH,
        description="PEM-encoded RSA private key matching the certificate",
    )
    verify_server_certificate: bool = Field(
        default=False,
        description="Validate the endpoint's certificate chain and host name",
    )
    open_timeout_seconds: float = Field(default=30.0, gt=0, description="TCP + TLS connect timeout")
    read_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Bound on each write/read once connected",
    )
    log_level: str = Field(default="INFO", description="Root log level name")
    log_json: bool = Field(default=True, description="Emit JSON log lines")
    health_port: int = Field(default=8080, description="Port for the runner's health endpoints")
    batch_size: int = Field(default=100, gt=0, description="Records per batch in the stdin runner")

    _endpoint: Endpoint = PrivateAttr()

    @field_validator("endpoint_url")
    @classmethod
    def _check_endpoint_url(cls, value: str) -> str:
        parse_endpoint(value)
        return value.strip()

    @model_validator(mode="after")
    def _parse_endpoint_once(self) -> ForwarderConfig:
        self._endpoint = parse_endpoint(self.endpoint_url)
        return self

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint
