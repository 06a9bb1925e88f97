"""Email service for report delivery (Resend).

To send to any recipient, verify a domain at resend.com/domains and set
EMAIL_FROM to an address at that domain.
"""

import logging
from pathlib import Path
from typing import Optional

import anyio

from app.config import settings
from app.core.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


def _should_skip_email() -> bool:
    """Outbound mail is disabled only in the test environment."""
    return settings.ENVIRONMENT == "test"


def split_recipients(recipients: str) -> list[str]:
    """``"a@x.com, b@y.com,"`` -> ``["a@x.com", "b@y.com"]``"""
    return [part.strip() for part in recipients.split(",") if part.strip()]


def send_email(
    to_email: str,
    subject: str,
    body: str,
    attachment_path: Optional[Path] = None,
) -> bool:
    """
    Send a plain-text email, optionally with one file attached.

    Returns True if sent, False if skipped (test environment).
    Raises EmailDeliveryError when no transport is configured or the provider
    rejects the message, so callers can tell a failed report from a sent one.
    """
    if _should_skip_email():
        logger.info("Email skipped (test env): %r to %s", subject, to_email)
        return False
    if not settings.RESEND_API_KEY:
        raise EmailDeliveryError(f"Cannot send {subject!r} to {to_email}: RESEND_API_KEY not set")

    params = {
        "from": settings.EMAIL_FROM,
        "to": [to_email],
        "subject": subject,
        "text": body,
    }
    if attachment_path is not None and attachment_path.exists():
        params["attachments"] = [
            {
                "filename": attachment_path.name,
                "content": list(attachment_path.read_bytes()),
            }
        ]

    try:
        import resend

        resend.api_key = settings.RESEND_API_KEY
        resend.Emails.send(params)
    except Exception as e:
        logger.exception("Failed to send %r to %s", subject, to_email)
        raise EmailDeliveryError(f"Failed to send {subject!r} to {to_email}: {e}") from e

    logger.info("Email %r sent to %s", subject, to_email)
    return True


async def send_email_async(
    to_email: str,
    subject: str,
    body: str,
    attachment_path: Optional[Path] = None,
) -> bool:
    """Run the blocking Resend call in a worker thread."""
    return await anyio.to_thread.run_sync(
        lambda: send_email(to_email, subject, body, attachment_path)
    )
