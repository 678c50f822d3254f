"""MSG91 implementation of SmsProvider.

Uses the MSG91 OTP API with a DLT-approved template: the code is passed as
the ``otp`` parameter so MSG91 substitutes it into the template. Mobile
numbers are sent without the leading ``+``.
"""

from config import SmsSettings
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)


def _mask(mobile: str) -> str:
    return "*" * max(0, len(mobile) - 4) + mobile[-4:]


class Msg91SmsProvider:
    def __init__(self, settings: SmsSettings, http_client: HttpClient) -> None:
        self._settings = settings
        self._http = http_client

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    async def send_otp_sms(self, mobile: str, otp_code: str) -> bool:
        if not self.is_configured:
            log.error("msg91_send_failed", reason="not_configured")
            return False

        params = {
            "template_id": self._settings.msg91_template_id,
            "mobile": mobile.lstrip("+"),
            "otp": otp_code,
        }
        headers = {
            "authkey": self._settings.msg91_auth_key,
            "Content-Type": "application/json",
        }

        try:
            response = await self._http.post(
                self._settings.msg91_api_url, params=params, headers=headers
            )
        except Exception as e:
            log.error(
                "sms_send_error",
                mobile=_mask(mobile),
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if response.status_code != 200:
            log.error(
                "sms_send_failed",
                mobile=_mask(mobile),
                status_code=response.status_code,
                response=response.text[:200],
            )
            return False

        try:
            body = response.json()
        except ValueError:
            body = {}
        if body.get("type") == "error":
            log.error("sms_send_failed", mobile=_mask(mobile), reason=body.get("message"))
            return False

        log.info("sms_sent_success", mobile=_mask(mobile))
        return True
