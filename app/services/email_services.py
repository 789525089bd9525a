import logging
import smtplib
from email.mime.text import MIMEText
from email.utils import formataddr

from app.config import Settings, settings

logger = logging.getLogger(__name__)


class SmtpNotifier:
    """Sends plain-text mail through an SMTP relay using STARTTLS."""

    def __init__(self, config: Settings = settings, timeout: float = 10.0):
        self.host = config.SMTP_HOST
        self.port = config.SMTP_PORT
        self.user = config.SMTP_USER
        self.password = config.SMTP_PASS
        self.from_email = config.FROM_EMAIL or config.SMTP_USER
        self.from_name = config.MAIL_FROM_NAME
        self.timeout = timeout
        if not self.from_email:
            logger.warning("FROM_EMAIL and SMTP_USER are not set; outgoing mail is disabled")

    def send(self, to: str, subject: str, body: str) -> bool:
        if not self.from_email:
            logger.error("Cannot send mail to %s: no sender address configured", to)
            return False

        msg = MIMEText(body)
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = to

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                server.starttls()
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send mail to %s via %s:%s: %s", to, self.host, self.port, exc)
            return False

        logger.info("Mail sent to %s subject=%s", to, subject)
        return True


def get_notifier() -> SmtpNotifier:
    return SmtpNotifier(settings)
