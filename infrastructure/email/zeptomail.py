"""ZeptoMail implementation of EmailProvider.

One message type is sent: the OTP email. The HTML body comes from the
``otp.html`` Jinja2 template and a plain-text alternative is always attached.
Recipient addresses are logged with the local part masked.
"""

import os

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import EmailSettings
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

_ZEPTO_API_URL = "https://api.zeptomail.in/v1.1/email"
_AUTH_SCHEME = "Zoho-enczapikey "
_ACCEPTED_STATUS = frozenset({200, 201, 202})
_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "templates",
    "emails",
)


def _mask(address: str) -> str:
    local, _, domain = address.partition("@")
    return f"{local[:1]}***@{domain}" if domain else "***"


class ZeptoMailProvider:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: HttpClient,
        otp_ttl_seconds: int = 600,
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._ttl_minutes = max(1, otp_ttl_seconds // 60)
        self._templates = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def _auth_header(self) -> str:
        token = self._settings.zepto_api_token
        return token if token.startswith(_AUTH_SCHEME) else _AUTH_SCHEME + token

    def _otp_message(self, email: str, otp_code: str) -> dict:
        sender = self._settings.zepto_from_name
        html = self._templates.get_template("otp.html").render(
            otp_code=otp_code,
            expires_in_minutes=self._ttl_minutes,
            sender_name=sender,
        )
        text = (
            f"Your verification code is: {otp_code}\n\n"
            f"This code expires in {self._ttl_minutes} minutes.\n"
            f"If you did not request it, you can ignore this email."
        )
        return {
            "from": {"address": self._settings.zepto_from_email, "name": sender},
            "to": [{"email_address": {"address": email, "name": email}}],
            "subject": f"Your {sender} verification code",
            "htmlbody": html,
            "textbody": text,
        }

    async def send_otp_email(self, email: str, otp_code: str) -> bool:
        recipient = _mask(email)
        if not self._settings.zepto_api_token:
            log.error("email_send_failed", reason="not_configured")
            return False

        headers = {
            "Authorization": self._auth_header(),
            "Content-Type": "application/json",
        }
        try:
            response = await self._http.post(
                _ZEPTO_API_URL,
                json=self._otp_message(email, otp_code),
                headers=headers,
            )
        except Exception as e:
            log.error(
                "email_send_error",
                recipient=recipient,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if response.status_code not in _ACCEPTED_STATUS:
            log.error(
                "email_send_failed",
                recipient=recipient,
                status_code=response.status_code,
                response=response.text[:200],
            )
            return False

        log.info("email_sent_success", recipient=recipient)
        return True
