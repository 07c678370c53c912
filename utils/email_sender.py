"""
utils/email_sender.py
---------------------
Outgoing email over SMTP (STARTTLS).
"""

import smtplib
from email.message import EmailMessage

from config import (
    EMAIL_SENDER,
    SMTP_HOST,
    SMTP_PASSWORD,
    SMTP_PORT,
    SMTP_USER,
    WEBSITE_URL,
)
from utils.errors import EmailDeliveryError
from utils.logger import get_logger

logger = get_logger(__name__)


def build_verification_email(username: str, email: str, token: str) -> EmailMessage:
    """Compose the verification email with a plain-text and an HTML part."""
    link = f"{WEBSITE_URL}/verify-email?token={token}"
    message = EmailMessage()
    message["From"] = EMAIL_SENDER
    message["To"] = email
    message["Subject"] = "Verify your Classical Review Email"
    message.set_content(f"Email verification: {link}")
    message.add_alternative(
        f"""
        <p>Hello {username},</p>
        <p>Please follow the link below to verify your email address for Classical Review.</p>
        <a href="{link}">Verification</a>
        """,
        subtype="html",
    )
    return message


def send_verification_email(username: str, email: str, token: str) -> None:
    """
    Send the account verification email.

    Raises:
        EmailDeliveryError: If the message could not be handed to the SMTP server.
    """
    message = build_verification_email(username, email, token)
    try:
        with smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=10) as smtp:
            smtp.starttls()
            if SMTP_USER:
                smtp.login(SMTP_USER, SMTP_PASSWORD)
            smtp.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send verification email to {email}: {e}")
        raise EmailDeliveryError(
            "Error while sending email verification", email, "Verification"
        ) from e
    logger.info(f"Sent verification email to {email}")
