# storefront/services/mailer.py
"""Outbound mail through Gmail using an OAuth2 refresh token instead of a password."""
import base64
import logging
import smtplib
import threading
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr

import requests

from ..errors import NotificationError

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ("user", "client_id", "client_secret", "refresh_token")

_FIELD_LABELS = {
    "user": "EMAIL",
    "client_id": "CLIENT_ID",
    "client_secret": "CLIENT_SECRET",
    "refresh_token": "REFRESH_TOKEN",
}


@dataclass(frozen=True)
class MailSettings:
    user: str = ""
    client_id: str = ""
    client_secret: str = ""
    refresh_token: str = ""
    sender_name: str = "Yerevan Shop"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465
    token_uri: str = "https://oauth2.googleapis.com/token"

    @classmethod
    def from_config(cls, config) -> "MailSettings":
        return cls(
            user=config.get("MAIL_USER") or "",
            client_id=config.get("GOOGLE_CLIENT_ID") or "",
            client_secret=config.get("GOOGLE_CLIENT_SECRET") or "",
            refresh_token=config.get("GOOGLE_REFRESH_TOKEN") or "",
            sender_name=config.get("MAIL_SENDER_NAME") or config.get("SHOP_NAME") or "Yerevan Shop",
            smtp_host=config.get("MAIL_SMTP_HOST") or "smtp.gmail.com",
            smtp_port=int(config.get("MAIL_SMTP_PORT") or 465),
            token_uri=config.get("MAIL_TOKEN_URI") or "https://oauth2.googleapis.com/token",
        )

    def missing_fields(self):
        return [f for f in REQUIRED_FIELDS if not getattr(self, f)]


class GmailOAuth2Transport:
    """SMTP over SSL authenticated with XOAUTH2; a fresh access token per session."""

    def __init__(self, settings: MailSettings):
        self.settings = settings

    def _access_token(self) -> str:
        s = self.settings
        resp = requests.post(
            s.token_uri,
            data={
                "client_id": s.client_id,
                "client_secret": s.client_secret,
                "refresh_token": s.refresh_token,
                "grant_type": "refresh_token",
            },
        )
        resp.raise_for_status()
        token = resp.json().get("access_token")
        if not token:
            raise RuntimeError("token endpoint returned no access_token")
        return token

    def _open(self) -> smtplib.SMTP_SSL:
        token = self._access_token()
        auth = f"user={self.settings.user}\x01auth=Bearer {token}\x01\x01"
        smtp = smtplib.SMTP_SSL(self.settings.smtp_host, self.settings.smtp_port)
        try:
            smtp.ehlo()
            code, resp = smtp.docmd("AUTH", "XOAUTH2 " + base64.b64encode(auth.encode()).decode())
            if code != 235:
                raise smtplib.SMTPAuthenticationError(code, resp)
        except Exception:
            smtp.close()
            raise
        return smtp

    def verify(self) -> None:
        smtp = self._open()
        smtp.quit()

    def send(self, message: EmailMessage) -> None:
        smtp = self._open()
        try:
            smtp.send_message(message)
        finally:
            smtp.quit()


class Mailer:
    def __init__(self, settings: MailSettings, transport=None):
        self.settings = settings
        self.transport = transport or GmailOAuth2Transport(settings)
        self.verify_thread = None

    @property
    def from_address(self) -> str:
        return formataddr((self.settings.sender_name, self.settings.user))

    def report_configuration(self) -> bool:
        """Log which credentials are present (never their values). True when complete."""
        log.info("Mail configuration loaded (OAuth 2.0): EMAIL=%s", self.settings.user or "MISSING")
        for f in REQUIRED_FIELDS[1:]:
            log.info("- %s: %s", _FIELD_LABELS[f], "Found" if getattr(self.settings, f) else "MISSING")
        missing = self.settings.missing_fields()
        if missing:
            log.error(
                "Mail credentials incomplete, missing: %s",
                ", ".join(_FIELD_LABELS[f] for f in missing),
            )
            return False
        return True

    def verify(self) -> bool:
        try:
            self.transport.verify()
        except Exception as e:
            log.error("Transporter verification error: %s", e)
            return False
        log.info("Transporter is ready to take messages")
        return True

    def verify_in_background(self) -> threading.Thread:
        """Run `verify` on a daemon thread so a slow relay never holds up startup or CLI commands."""
        self.verify_thread = threading.Thread(target=self.verify, name="mail-verify", daemon=True)
        self.verify_thread.start()
        return self.verify_thread

    def send(self, to, subject, text, html=None) -> None:
        if self.settings.missing_fields():
            raise NotificationError("Missing Google OAuth credentials in Environment Variables")

        msg = EmailMessage()
        msg["From"] = self.from_address
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(text)
        if html:
            msg.add_alternative(html, subtype="html")

        try:
            self.transport.send(msg)
        except Exception as e:
            raise NotificationError(str(e) or type(e).__name__) from e
        log.info("mail '%s' sent to %s", subject, to)
