from email.message import EmailMessage
from urllib.parse import urlencode

from tasktracker.core.core import Service
from tasktracker.core.modules.mail.sender import send_email

RESET_SUBJECT = "Reset your TaskTracker password"


class MailService(Service):
    """Builds and sends transactional emails."""

    def build_reset_link(self, email: str, token: str) -> str:
        query = urlencode({"token": token, "email": email})
        return f"{self.core.config.frontend_url.rstrip('/')}/reset-password?{query}"

    async def send_password_reset(self, email: str, token: str, expires_in_minutes: int) -> None:
        message = EmailMessage()
        message["From"] = self.core.config.mail_from
        message["To"] = email
        message["Subject"] = RESET_SUBJECT
        message.set_content(
            "We received a request to reset your password.\n\n"
            f"Open this link to choose a new one:\n{self.build_reset_link(email, token)}\n\n"
            f"The link expires in {expires_in_minutes} minutes. "
            "If you did not ask for a reset, ignore this email.\n"
        )
        await send_email(self.core.config, message)
