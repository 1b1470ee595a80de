"""
Email Service using Resend

Thin async wrapper over the Resend API. Sends never raise: every call
returns True on success and False on failure so callers decide whether a
failed email is fatal.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

import resend

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class EmailAttachment:
    """A file attached to an outgoing email."""

    filename: str
    content: bytes
    content_type: str = PDF_CONTENT_TYPE

    def to_resend(self) -> dict:
        return {
            "filename": self.filename,
            "content": list(self.content),
            "content_type": self.content_type,
        }


async def attachment_from_file(
    path: Path,
    filename: str | None = None,
    content_type: str = PDF_CONTENT_TYPE,
) -> EmailAttachment:
    """Read a local file into an attachment without blocking the event loop."""
    content = await asyncio.to_thread(Path(path).read_bytes)
    return EmailAttachment(
        filename=filename or Path(path).name,
        content=content,
        content_type=content_type,
    )


class EmailClient:
    """
    Resend client created once at startup and passed to the components
    that send mail.

    When no API key is configured the client logs the email instead of
    sending it, which keeps local development working without credentials.
    """

    def __init__(
        self,
        api_key: str | None,
        default_sender: str,
        timeout_seconds: float = 30.0,
    ):
        self.api_key = api_key
        self.default_sender = default_sender
        self.timeout_seconds = timeout_seconds
        if api_key:
            resend.api_key = api_key

    async def send(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        attachments: list[EmailAttachment] | None = None,
        sender: str | None = None,
    ) -> bool:
        """
        Send an email using Resend.

        Args:
            to_email: Recipient email address
            subject: Email subject line
            html_content: HTML content of the email
            attachments: Optional file attachments
            sender: Overrides the default "from" address

        Returns:
            True if email was sent successfully
        """
        if not self.api_key:
            logger.warning("RESEND_API_KEY not set - logging email instead of sending")
            logger.info(
                f"EMAIL TO: {to_email} | SUBJECT: {subject} | "
                f"ATTACHMENTS: {[a.filename for a in attachments or []]}"
            )
            return True

        params: resend.Emails.SendParams = {
            "from": sender or self.default_sender,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }
        if attachments:
            params["attachments"] = [attachment.to_resend() for attachment in attachments]

        try:
            # Run sync Resend call in thread pool to avoid blocking event loop
            email = await asyncio.wait_for(
                asyncio.to_thread(resend.Emails.send, params),
                timeout=self.timeout_seconds,
            )
            logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
            return True
        except TimeoutError:
            logger.error(f"Timed out after {self.timeout_seconds}s sending email to {to_email}")
            return False
        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False
