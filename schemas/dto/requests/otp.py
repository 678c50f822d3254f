"""
Request DTOs for OTP endpoints.

SendOtpRequest    — POST /auth/otp/send
VerifyOtpRequest  — POST /auth/otp/verify
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.models.otp import OtpType


class SendOtpRequest(BaseModel):
    """Request body for POST /auth/otp/send.

    ``value`` is the phone number or email address the code is sent to.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: OtpType
    value: str

    @field_validator("type", mode="before")
    @classmethod
    def _check_type(cls, v):
        if v not in {t.value for t in OtpType}:
            raise ValueError("type must be 'mobile' or 'email'")
        return v

    @field_validator("value")
    @classmethod
    def _check_value(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("value is required")
        return v


class VerifyOtpRequest(BaseModel):
    """Request body for POST /auth/otp/verify.

    ``code`` is the 6-digit OTP delivered to the target.
    """

    model_config = ConfigDict(populate_by_name=True)

    otp_id: str = Field(alias="otpId", min_length=1)
    code: str = Field(pattern=r"^\d{6}$")
