"""
OTP issuance and verification.

issue()  — generate a 6-digit code, persist only its SHA-256 hash with a
           10-minute expiry, then hand the plaintext to the delivery gateway.
verify() — check a code against a stored OTP by otpId and mark it verified.

Several OTPs may be outstanding for the same target; verification is keyed
on otpId only.
"""

from __future__ import annotations

from config import OtpSettings
from errors import (
    NotFoundError,
    OtpAttemptsExceededError,
    OtpExpiredError,
    OtpMismatchError,
    ServerError,
    ValidationError,
)
from infrastructure.delivery.protocol import OtpDeliveryGateway
from infrastructure.store.protocol import (
    ConditionFailedError,
    LimitReachedError,
    RecordStore,
    StoreError,
)
from schemas.dto.responses.otp import OtpIssuedResponse, OtpVerifiedResponse
from schemas.models.otp import OtpDoc, OtpType
from shared.crypto import hash_otp, otp_matches
from shared.datetime_utils import (
    Clock,
    from_epoch_seconds,
    to_epoch_seconds,
    to_iso,
    utc_now,
)
from shared.generators import generate_id, generate_otp_code
from shared.logging import get_logger, log_with_context

log = get_logger(__name__)


class OtpService:
    def __init__(
        self,
        store: RecordStore,
        gateway: OtpDeliveryGateway,
        settings: OtpSettings,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._settings = settings
        self._clock = clock

    async def issue(self, otp_type: str, target: str) -> OtpIssuedResponse:
        if otp_type not in {t.value for t in OtpType}:
            raise ValidationError("type must be 'mobile' or 'email'", field="type")
        target = (target or "").strip()
        if not target:
            raise ValidationError("value is required", field="value")

        now = self._clock()
        code = generate_otp_code()
        otp_id = generate_id()
        expires_at = to_epoch_seconds(now) + self._settings.otp_ttl_seconds

        doc = OtpDoc(
            otp_id=otp_id,
            target=target,
            type=OtpType(otp_type),
            otp=hash_otp(code),
            expires_at=expires_at,
            created_at=to_iso(now),
        )
        record = doc.to_record()
        record["purgeAt"] = from_epoch_seconds(expires_at)

        otp_log = log_with_context(log, otp_id=otp_id, otp_type=otp_type)
        try:
            await self._store.put(doc.key, record)
        except StoreError:
            otp_log.error("otp_store_failed", exc_info=True)
            raise ServerError("Failed to send OTP")

        delivered = await self._gateway.send(target, otp_type, code)
        if not delivered:
            if self._settings.otp_require_delivery:
                otp_log.error("otp_delivery_failed")
                raise ServerError("Failed to send OTP")
            otp_log.warning("otp_delivery_skipped")

        otp_log.info("otp_issued", expires_at=expires_at, delivered=delivered)
        return OtpIssuedResponse(
            otp_id=otp_id, expires_in=self._settings.otp_ttl_seconds
        )

    async def verify(self, otp_id: str, code: str) -> OtpVerifiedResponse:
        otp_log = log_with_context(log, otp_id=otp_id)
        try:
            record = await self._store.get(otp_id)
        except StoreError:
            otp_log.error("otp_fetch_failed", exc_info=True)
            raise ServerError("Failed to verify OTP")

        doc = OtpDoc.from_record(record)
        if doc is None:
            otp_log.warning("otp_verification_failed", reason="not_found")
            raise NotFoundError("OTP not found")

        if doc.is_expired(to_epoch_seconds(self._clock())):
            otp_log.warning("otp_verification_failed", reason="expired")
            raise OtpExpiredError("OTP has expired")

        matches = otp_matches(code, doc.otp)
        if doc.verified and matches:
            return OtpVerifiedResponse(otp_id=otp_id)

        max_attempts = self._settings.otp_max_attempts
        if doc.attempts >= max_attempts:
            otp_log.warning("otp_verification_failed", reason="too_many_attempts")
            raise OtpAttemptsExceededError("Too many failed attempts")

        # Both writes re-check the ceiling atomically; the read above may be stale
        ceiling = {"attempts": max_attempts}
        try:
            if not matches:
                updated = await self._store.update(
                    otp_id, {}, increments={"attempts": 1}, below=ceiling
                )
                otp_log.warning(
                    "otp_verification_failed",
                    reason="mismatch",
                    attempts=updated.get("attempts"),
                )
                raise OtpMismatchError("Invalid OTP")

            await self._store.update(
                otp_id,
                {"verified": True, "verifiedAt": to_iso(self._clock())},
                below=ceiling,
            )
        except LimitReachedError:
            otp_log.warning("otp_verification_failed", reason="too_many_attempts")
            raise OtpAttemptsExceededError("Too many failed attempts")
        except ConditionFailedError:
            # Purged between the read and the write
            raise NotFoundError("OTP not found")
        except StoreError:
            otp_log.error("otp_update_failed", exc_info=True)
            raise ServerError("Failed to verify OTP")

        otp_log.info("otp_verified")
        return OtpVerifiedResponse(otp_id=otp_id)
