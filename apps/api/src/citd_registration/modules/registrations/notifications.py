"""
Registration Emails

Student confirmation and faculty batch report emails. All user-supplied
values are HTML-escaped before they are placed in a template.
"""

import logging
from datetime import datetime
from html import escape
from pathlib import Path
from zoneinfo import ZoneInfo

from citd_registration.core.email import (
    XLSX_CONTENT_TYPE,
    EmailClient,
    attachment_from_file,
)
from citd_registration.modules.registrations.export import REPORT_ATTACHMENT_NAME
from citd_registration.modules.registrations.queue import PendingNotification
from citd_registration.modules.registrations.schemas import StampedRegistration

logger = logging.getLogger(__name__)

STUDENT_SUBJECT = "Application Received - CITD Short Term Course"

_EMAIL_STYLES = """
            body { font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }
            .container { max-width: 600px; margin: 0 auto; padding: 40px 20px; }
            .header { color: #1a365d; margin-bottom: 24px; }
            .info-box { background-color: #f3f4f6; padding: 16px; border-radius: 8px; margin: 16px 0; }
            .students li { margin-bottom: 12px; }
            .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }
"""


def student_confirmation_html(record: StampedRegistration) -> str:
    safe_name = escape(record.applicant_name or "Applicant")
    safe_course = escape(record.course_name or "")
    safe_serial = escape(record.serial_number)
    course_line = f" <strong>{safe_course}</strong>" if safe_course else ""

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>{_EMAIL_STYLES}</style>
    </head>
    <body>
        <div class="container">
            <h3 class="header">Dear {safe_name},</h3>

            <p>Thank you for registering for the CITD short term course{course_line}.</p>

            <div class="info-box">
                <p><strong>Registration No:</strong> {safe_serial}</p>
            </div>

            <p>A copy of your application form is attached to this email.</p>

            <div class="footer">
                <p>CITD Hyderabad</p>
            </div>
        </div>
    </body>
    </html>
    """


async def send_student_confirmation(
    email_client: EmailClient,
    record: StampedRegistration,
    application_form_path: Path,
) -> bool:
    """
    Email the student their application form.

    Returns:
        True if sent; False when the send failed or the record has no email
    """
    if not record.email:
        logger.warning(f"Registration {record.serial_number} has no email, skipping confirmation")
        return False

    try:
        attachment = await attachment_from_file(application_form_path)
    except OSError as e:
        logger.error(f"Could not read application form {application_form_path}: {e}")
        return False

    sent = await email_client.send(
        to_email=record.email,
        subject=STUDENT_SUBJECT,
        html_content=student_confirmation_html(record),
        attachments=[attachment],
    )
    if sent:
        logger.info(f"Confirmation email sent for registration {record.serial_number}")
    return sent


def _link(url: str | None, label: str) -> str:
    if not url:
        return f"{label} unavailable"
    return f'<a href="{escape(url, quote=True)}">{label}</a>'


def batch_links_html(items: list[PendingNotification]) -> str:
    """HTML list with application and certificate links per student."""
    rows = [
        f"""
                <li>
                    <strong>{escape(item.applicant_name or 'Unnamed applicant')}</strong> ({escape(item.serial_number)})<br>
                    {_link(item.application_form_url, 'View Application')} |
                    {_link(item.certificate_url, 'View Certificate')}
                </li>"""
        for item in items
    ]
    return '<ul class="students">' + "".join(rows) + "\n            </ul>"


def batch_subject(timezone: str, now: datetime | None = None) -> str:
    now = now or datetime.now(ZoneInfo(timezone))
    local_time = now.astimezone(ZoneInfo(timezone)).strftime("%I:%M:%S %p")
    return f"Student Registration Batch Report - {local_time}"


def faculty_batch_html(items: list[PendingNotification]) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>{_EMAIL_STYLES}</style>
    </head>
    <body>
        <div class="container">
            <h3 class="header">Batch Registration Report</h3>

            <p>Please find links for <strong>{len(items)}</strong> new student(s) who registered in this period:</p>

            {batch_links_html(items)}

            <p>The updated master registration report from the database is also attached.</p>

            <div class="footer">
                <p>CITD Registration System</p>
            </div>
        </div>
    </body>
    </html>
    """


async def send_faculty_batch(
    email_client: EmailClient,
    to_email: str,
    sender: str,
    items: list[PendingNotification],
    report_path: Path,
    timezone: str,
) -> bool:
    """Send the batch report with the registrations workbook attached."""
    attachment = await attachment_from_file(
        report_path,
        filename=REPORT_ATTACHMENT_NAME,
        content_type=XLSX_CONTENT_TYPE,
    )
    return await email_client.send(
        to_email=to_email,
        subject=batch_subject(timezone),
        html_content=faculty_batch_html(items),
        attachments=[attachment],
        sender=sender,
    )
