import asyncio
import logging
import secrets
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from clubcms.exceptions import DeliveryFailure

logger = logging.getLogger(__name__)

OTP_BYTES = 3  # six hex characters


def generate_otp() -> str:
    return secrets.token_hex(OTP_BYTES)


def otp_email_body(otp: str, club_name: str, expire_minutes: int) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <h2 style="color: #0056b3;">Your One-Time Password (OTP)</h2>
        <p>Hello Admin,</p>
        <p>A one-time password was requested to log in to the {club_name} Admin Panel.</p>
        <p>Your OTP is: <strong><span style="font-size: 24px; color: #d9534f;">{otp}</span></strong></p>
        <p>This OTP is valid for <strong>{expire_minutes} minutes</strong>. Please do not share it with anyone.</p>
        <p>If you did not request this, please ignore this email.</p>
        <p>The {club_name} Team</p>
    </div>
    """


class Mailer(Protocol):
    async def send(self, to: str, subject: str, html: str) -> None:
        ...


class SmtpMailer:
    """Sends mail through an SMTP server with STARTTLS."""

    def __init__(self, host: str, port: int, sender: str | None, password: str | None):
        self.host = host
        self.port = port
        self.sender = sender
        self.password = password

    def _send_blocking(self, to: str, subject: str, html: str) -> None:
        message = MIMEMultipart()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.attach(MIMEText(html, "html"))

        with smtplib.SMTP(self.host, self.port, timeout=30) as server:
            server.starttls()
            if self.password:
                server.login(self.sender, self.password)
            server.sendmail(self.sender, to, message.as_string())

    async def send(self, to: str, subject: str, html: str) -> None:
        if not self.sender:
            raise DeliveryFailure("Mail sender is not configured.")
        try:
            await asyncio.to_thread(self._send_blocking, to, subject, html)
        except (smtplib.SMTPException, OSError) as e:
            logger.exception("SMTP error sending mail to %s", to)
            raise DeliveryFailure() from e
