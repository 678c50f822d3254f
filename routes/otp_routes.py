"""
OTP endpoints.

POST /auth/otp/send    — issue an OTP to a phone number or email address
POST /auth/otp/verify  — verify a code against an issued OTP
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_otp_service
from schemas.dto.requests.otp import SendOtpRequest, VerifyOtpRequest
from schemas.dto.responses.common import error_responses, success_body
from services.otp_service import OtpService

router = APIRouter(prefix="/auth/otp", tags=["otp"])


@router.post("/send", responses=error_responses(400, 500))
async def send_otp(
    body: SendOtpRequest,
    otp_service: OtpService = Depends(get_otp_service),
) -> dict:
    issued = await otp_service.issue(body.type.value, body.value)
    return success_body(issued)


@router.post("/verify", responses=error_responses(400, 404, 410, 429, 500))
async def verify_otp(
    body: VerifyOtpRequest,
    otp_service: OtpService = Depends(get_otp_service),
) -> dict:
    verified = await otp_service.verify(body.otp_id, body.code)
    return success_body(verified)
