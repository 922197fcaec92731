"""One-time password delivery."""
from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Protocol

from ..core.constants import DEFAULT_SMTP_TIMEOUT, OTP_TTL_MINUTES
from ..core.exceptions import DeliveryError

logger = logging.getLogger(__name__)


class OtpMailer(Protocol):
    def send_otp(self, email: str, otp: str) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int = 587
    username: str = ""
    password: str = ""
    sender: str = ""
    use_tls: bool = True
    timeout: float = DEFAULT_SMTP_TIMEOUT


def build_otp_message(*, sender: str, email: str, otp: str) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = "Your OTP Code"
    msg["From"] = f'"Attendance Panel" <{sender}>'
    msg["To"] = email
    msg.set_content(
        f"Use the OTP below to reset your password:\n\n{otp}\n\n"
        f"This code will expire in {OTP_TTL_MINUTES} minutes.\n"
    )
    msg.add_alternative(
        f"""\
<div style="font-family: Arial, sans-serif; padding: 20px;">
  <h2>Your OTP Code</h2>
  <p>Use the OTP below to reset your password:</p>
  <div style="font-size: 24px; font-weight: bold; color: #333;">{otp}</div>
  <p>This code will expire in {OTP_TTL_MINUTES} minutes.</p>
</div>
""",
        subtype="html",
    )
    return msg


class SmtpOtpMailer:
    def __init__(self, settings: SmtpSettings):
        self._settings = settings

    def send_otp(self, email: str, otp: str) -> None:
        s = self._settings
        msg = build_otp_message(sender=s.sender or s.username, email=email, otp=otp)
        try:
            with smtplib.SMTP(s.host, s.port, timeout=s.timeout) as smtp:
                if s.use_tls:
                    smtp.starttls()
                if s.username:
                    smtp.login(s.username, s.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Could not send OTP mail to %s: %s", email, e)
            raise DeliveryError("Could not send OTP email, please try again later")

        logger.info("OTP mail sent to %s", email)


class LoggingOtpMailer:
    """Development mailer: no SMTP host configured, the OTP only goes to the log."""

    def send_otp(self, email: str, otp: str) -> None:
        logger.warning("SMTP not configured; OTP for %s is %s", email, otp)
