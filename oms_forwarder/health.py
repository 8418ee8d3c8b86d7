"""FastAPI health endpoints for liveness and readiness probes."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from .models import CredentialState, ForwarderStatus, HealthStatus

if TYPE_CHECKING:
    from .output import OMSOutput


def create_health_app(output: OMSOutput) -> FastAPI:
    """Build a minimal FastAPI app with ``/health`` and ``/ready`` routes.

    ``/ready`` only turns 200 once the client credential has loaded, so a
    deployment with missing certificates stays visibly unready.
    """
    app = FastAPI(title="oms-forwarder health", docs_url=None, redoc_url=None)

    @app.get("/health")
    async def health() -> JSONResponse:
        status = HealthStatus(
            status=output.status,
            credential_state=output.credential_state,
            endpoint=str(output.config.endpoint) if output.config is not None else None,
            last_probe_ok=output.last_probe_ok,
            uptime_seconds=time.monotonic() - output.start_time,
            stats=output.stats,
        )
        code = 200 if output.status == ForwarderStatus.RUNNING else 503
        return JSONResponse(content=status.model_dump(mode="json"), status_code=code)

    @app.get("/ready")
    async def ready() -> JSONResponse:
        is_ready = (
            output.status == ForwarderStatus.RUNNING
            and output.credential_state == CredentialState.VERIFIED
        )
        return JSONResponse(
            content={"ready": is_ready},
            status_code=200 if is_ready else 503,
        )

    return app
