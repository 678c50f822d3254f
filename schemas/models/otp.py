"""
OTP document model.

Maps to the `otps` collection, keyed by otpId.

otp stores SHA-256(code) — the plain code is never stored.
attempts counts failed verification tries; verified flips once on success.
expiresAt is epoch seconds; the store adds a BSON-date copy for its TTL index.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Optional

from pydantic import Field

from schemas.models.base import RecordModel


class OtpType(str, Enum):
    mobile = "mobile"
    email = "email"


class OtpDoc(RecordModel):
    """Document model for the `otps` collection."""

    key_field: ClassVar[str] = "otp_id"

    otp_id: str
    target: str
    type: OtpType
    otp: str
    verified: bool = False
    attempts: int = Field(default=0, ge=0)
    expires_at: int
    created_at: str
    verified_at: Optional[str] = None

    def is_expired(self, now_epoch: int) -> bool:
        return now_epoch > self.expires_at
