"""SmsProvider protocol — services depend on this, not the concrete implementation."""

from typing import Protocol


class SmsProvider(Protocol):
    @property
    def is_configured(self) -> bool: ...

    async def send_otp_sms(self, mobile: str, otp_code: str) -> bool: ...
