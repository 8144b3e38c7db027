import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage

from src.app.services.email_dispatcher import EmailDeliveryError, IEmailDispatcher

logger = logging.getLogger(__name__)

RESET_CODE_SUBJECT = "Your Password Reset Code"


def build_reset_code_message(sender: str, recipient: str, code: str, ttl_minutes: int) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = RESET_CODE_SUBJECT
    msg["From"] = sender
    msg["To"] = recipient
    msg.set_content(
        f"Your verification code is: {code}\n\n"
        f"This code will expire in {ttl_minutes} minutes.\n"
        "If you did not request a password reset, you can ignore this email."
    )
    return msg


class SmtpEmailDispatcher(IEmailDispatcher):
    """Sends mail through an SMTP relay; the blocking client runs in a worker thread"""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        starttls: bool = True,
        ttl_minutes: int = 10,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.starttls = starttls
        self.ttl_minutes = ttl_minutes
        self.timeout = timeout

    async def send_reset_code(self, email: str, code: str) -> None:
        msg = build_reset_code_message(self.sender, email, code, self.ttl_minutes)
        try:
            await asyncio.to_thread(self._send, msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"Failed to send password reset email: {exc}")
            raise EmailDeliveryError("Failed to send password reset email") from exc
        logger.info("Password reset email sent")

    def _send(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.starttls:
                server.starttls(context=ssl.create_default_context())
            if self.username:
                server.login(self.username, self.password)
            server.send_message(msg)


class ConsoleEmailDispatcher(IEmailDispatcher):
    """Development dispatcher: writes the code to the log instead of sending it"""

    async def send_reset_code(self, email: str, code: str) -> None:
        logger.warning(f"Password reset code for {email}: {code}")
