"""OtpDeliveryGateway protocol — services depend on this, not the concrete implementation."""

from typing import Protocol


class OtpDeliveryGateway(Protocol):
    async def send(self, target: str, otp_type: str, code: str) -> bool: ...

    def is_configured(self, otp_type: str) -> bool: ...
