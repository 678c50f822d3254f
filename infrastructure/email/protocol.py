"""EmailProvider protocol — services depend on this, not the concrete implementation."""

from typing import Protocol


class EmailProvider(Protocol):
    @property
    def is_configured(self) -> bool: ...

    async def send_otp_email(self, email: str, otp_code: str) -> bool: ...
