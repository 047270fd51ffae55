"""Email delivery over SMTP."""

from email.message import EmailMessage

import aiosmtplib
import structlog

from tasktracker.config import Config
from tasktracker.errors import MailDeliveryError

logger = structlog.get_logger(__name__)


async def send_email(config: Config, message: EmailMessage) -> None:
    """Hand a message to the configured SMTP server.

    Raises:
        MailDeliveryError: If the server cannot be reached or rejects the message
    """
    try:
        await aiosmtplib.send(
            message,
            hostname=config.smtp_host,
            port=config.smtp_port,
            username=config.smtp_username,
            password=config.smtp_password,
            start_tls=config.smtp_start_tls,
        )
    except (aiosmtplib.SMTPException, OSError) as e:
        logger.exception("email_send_failed", subject=message["Subject"])
        raise MailDeliveryError(str(e)) from e
    else:
        logger.debug("email_sent", subject=message["Subject"])
