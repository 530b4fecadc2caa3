"""Resend implementation of EmailProvider.

Sends the one-time code through Resend's transactional email API. The HTML
body comes from a Jinja2 template; the subject carries the code so it is
visible in notification previews.
"""

import os

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import EmailSettings
from infrastructure.http_client import HttpClient
from shared.logging import get_logger, mask_email

log = get_logger(__name__)

_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "templates",
    "emails",
)


class ResendProvider:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: HttpClient,
        otp_ttl_seconds: int = 300,
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._otp_ttl_minutes = max(1, otp_ttl_seconds // 60)
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    async def _send(self, to_email: str, subject: str, html_body: str) -> bool:
        if not self._settings.resend_api_key:
            log.error("email_send_failed", reason="api_key_not_configured")
            return False

        payload = {
            "from": self._settings.resend_from,
            "to": to_email,
            "subject": subject,
            "html": html_body,
        }
        headers = {"Authorization": f"Bearer {self._settings.resend_api_key}"}

        try:
            response = await self._http.post(
                self._settings.resend_api_url, json=payload, headers=headers
            )
        except Exception as e:
            log.error(
                "email_send_error",
                to_email=mask_email(to_email),
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if response.is_success:
            log.info("email_sent_success", to_email=mask_email(to_email))
            return True
        log.error(
            "email_send_failed",
            to_email=mask_email(to_email),
            status_code=response.status_code,
            response=response.text[:200],
        )
        return False

    async def send_otp_email(self, email: str, otp_code: str) -> bool:
        template = self._jinja.get_template("otp_code.html")
        html_body = template.render(
            otp_code=otp_code,
            product_name=self._settings.email_product_name,
            expires_minutes=self._otp_ttl_minutes,
        )
        return await self._send(email, f"Your Access Code: {otp_code}", html_body)
