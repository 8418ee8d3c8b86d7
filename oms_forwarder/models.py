"""Data models for the OMS forwarder."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class CredentialState(str, Enum):
    """Lifecycle of the process-wide client credential."""

    UNINITIALIZED = "uninitialized"
    PENDING = "pending"
    VERIFIED = "verified"


class ForwarderStatus(str, Enum):
    """Runtime status of the output plugin."""

    CONFIGURED = "configured"
    RUNNING = "running"
    STOPPED = "stopped"


class Endpoint(BaseModel):
    """Parsed delivery target, derived once from ``endpoint_url``."""

    model_config = {"frozen": True}

    scheme: str = Field(min_length=1, description="URL scheme (https in production)")
    host: str = Field(min_length=1, description="Target host name or address")
    port: int = Field(gt=0, lt=65536, description="Target TCP port")
    path: str = Field(default="/", description="Request path for record POSTs")

    @property
    def base_url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}"

    def __str__(self) -> str:
        return f"{self.base_url}{self.path}"


class RequestDescriptor(BaseModel):
    """One outbound request: built per record, consumed once."""

    model_config = {"frozen": True}

    method: str = Field(default="POST", description="HTTP method")
    path: str = Field(description="Request path on the endpoint")
    body: bytes = Field(default=b"", description="Serialized request body")


class Outcome(BaseModel):
    """Result of a single delivery attempt."""

    model_config = {"frozen": True}

    success: bool = Field(description="True iff the endpoint answered 2xx")
    summary: str | None = Field(
        default=None,
        description="Human-readable failure summary (status, reason, body or 'no response')",
    )
    status_code: int | None = Field(default=None, description="HTTP status, if any")

    @classmethod
    def ok(cls, status_code: int) -> Outcome:
        return cls(success=True, status_code=status_code)

    @classmethod
    def failed(cls, summary: str, *, status_code: int | None = None) -> Outcome:
        return cls(success=False, summary=summary, status_code=status_code)


class DeliveryStats(BaseModel):
    """Running per-process delivery counters, surfaced on ``/health``."""

    delivered: int = 0
    failed: int = 0
    skipped: int = 0


class HealthStatus(BaseModel):
    """Response model for the ``/health`` endpoint."""

    status: ForwarderStatus | None = Field(description="Plugin status, null before configure")
    credential_state: CredentialState = Field(description="Client credential lifecycle state")
    endpoint: str | None = Field(default=None, description="Configured delivery URL")
    last_probe_ok: bool | None = Field(
        default=None,
        description="Result of the startup probe, null if it has not run",
    )
    uptime_seconds: float = Field(description="Seconds since start() was called")
    stats: DeliveryStats = Field(default_factory=DeliveryStats)
