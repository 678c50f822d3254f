"""
GET /health

MongoDB unreachable → "unhealthy" (503).
An OTP channel without credentials → "degraded" (200).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from dependencies import get_db
from schemas.dto.responses.common import HealthResponse
from shared.logging import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["health"])

# check name → OTP type routed through that channel
_CHANNELS = {"sms": "mobile", "email": "email"}


async def _mongodb_status(db) -> str:
    try:
        await db.client.admin.command("ping")
    except Exception as e:
        log.warning("health_mongodb_unreachable", error_type=type(e).__name__)
        return "error"
    return "ok"


def _channel_statuses(request: Request) -> dict[str, str]:
    gateway = request.app.state.otp_gateway
    return {
        name: "ok" if gateway.is_configured(otp_type) else "not_configured"
        for name, otp_type in _CHANNELS.items()
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def health_check(request: Request, db=Depends(get_db)) -> JSONResponse:
    checks = {"mongodb": await _mongodb_status(db)}
    checks.update(_channel_statuses(request))

    if checks["mongodb"] != "ok":
        status = "unhealthy"
    elif all(v == "ok" for v in checks.values()):
        status = "healthy"
    else:
        status = "degraded"

    body = HealthResponse(status=status, checks=checks)
    return JSONResponse(
        status_code=503 if status == "unhealthy" else 200,
        content=body.model_dump(),
    )
