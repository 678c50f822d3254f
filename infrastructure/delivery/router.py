"""Routes an OTP to the SMS or email channel according to its type."""

from typing import Optional

from infrastructure.email.protocol import EmailProvider
from infrastructure.sms.protocol import SmsProvider
from shared.logging import get_logger

log = get_logger(__name__)


class ChannelRouter:
    """OtpDeliveryGateway that dispatches ``mobile`` to SMS and ``email`` to email."""

    def __init__(
        self,
        sms: Optional[SmsProvider] = None,
        email: Optional[EmailProvider] = None,
    ) -> None:
        self._sms = sms
        self._email = email

    def is_configured(self, otp_type: str) -> bool:
        if otp_type == "mobile":
            return self._sms is not None and self._sms.is_configured
        if otp_type == "email":
            return self._email is not None and self._email.is_configured
        return False

    async def send(self, target: str, otp_type: str, code: str) -> bool:
        if not self.is_configured(otp_type):
            log.warning("otp_channel_not_configured", otp_type=otp_type)
            return False
        if otp_type == "mobile":
            return await self._sms.send_otp_sms(target, code)
        return await self._email.send_otp_email(target, code)
