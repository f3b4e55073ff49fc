"""외부 알림 채널(이메일/WhatsApp) 연동입니다. 발송 결과는 성공 여부(bool)로만 돌려줍니다."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


class Notifier:
    channel = "generic"

    def send(self, recipient: str, subject: str, body: str) -> bool:
        raise NotImplementedError


class EmailNotifier(Notifier):
    channel = "email"

    def send(self, recipient: str, subject: str, body: str) -> bool:
        sender = settings.SMTP_FROM or settings.SMTP_USER
        msg = MIMEMultipart("alternative")
        msg["From"] = sender
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.attach(MIMEText(body, "html"))
        try:
            with smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.HTTP_TIMEOUT_SECONDS) as server:
                if settings.SMTP_USER:
                    server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
                server.sendmail(sender, [recipient], msg.as_string())
            return True
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("[notify] email to %s failed: %s", recipient, exc)
            return False


class WhatsAppNotifier(Notifier):
    channel = "whatsapp"

    def __init__(self, http: Optional[httpx.Client] = None):
        self.http = http or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)

    def send(self, recipient: str, subject: str, body: str) -> bool:
        if not settings.WHATSAPP_API_URL:
            return False
        try:
            response = self.http.post(
                settings.WHATSAPP_API_URL,
                headers={"Authorization": f"Bearer {settings.WHATSAPP_API_TOKEN}"},
                json={"to": recipient, "message": f"{subject}\n\n{body}"},
            )
        except httpx.HTTPError as exc:
            logger.warning("[notify] whatsapp to %s failed: %s", recipient, exc)
            return False
        if response.status_code >= 300:
            logger.warning("[notify] whatsapp to %s rejected: %s", recipient, response.text)
            return False
        return True
