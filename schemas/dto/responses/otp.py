"""
Response DTOs for OTP endpoints.

OtpIssuedResponse    — POST /auth/otp/send
OtpVerifiedResponse  — POST /auth/otp/verify
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class OtpIssuedResponse(BaseModel):
    """Handle for an issued OTP. The code itself is never returned."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    otp_id: str
    expires_in: int


class OtpVerifiedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    otp_id: str
    verified: bool = True
