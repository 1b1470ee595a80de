"""
Registration Service Layer

Runs one submission end to end:

1. Allocate the serial number
2. Render the certificate and the application form
3. Upload both PDFs to object storage
4. Persist the registration with the document URLs
5. Email the student a copy of the application form
6. Queue the submission for the next faculty batch
7. Remove the local PDFs

Failure policy:
- Template, render and persistence failures abort the submission with a
  RegistrationServiceError. Side effects of earlier steps (for example an
  uploaded PDF with no stored registration) are not rolled back.
- A failed upload does not abort: the registration is stored with a null
  URL for that document and the failure is logged.
- A failed student email does not abort: the submission still succeeds.
- Local PDFs are removed once the submission finishes, successful or not,
  unless KEEP_FAILED_DOCUMENTS retains them after a failure.
"""

import asyncio
import logging
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from citd_registration.modules.registrations import repository
from citd_registration.modules.registrations.dependencies import RegistrationServices
from citd_registration.modules.registrations.documents import DocumentKind
from citd_registration.modules.registrations.exceptions import (
    DocumentRenderError,
    DuplicateSerialError,
    RegistrationPersistenceError,
    RegistrationServiceError,
    TemplateAssetError,
)
from citd_registration.modules.registrations.notifications import send_student_confirmation
from citd_registration.modules.registrations.queue import PendingNotification
from citd_registration.modules.registrations.repository import DuplicateSerialNumberError
from citd_registration.modules.registrations.schemas import (
    RegistrationCreate,
    RegistrationSubmitResponse,
)

logger = logging.getLogger(__name__)

__all__ = [
    "DocumentRenderError",
    "DuplicateSerialError",
    "RegistrationPersistenceError",
    "RegistrationServiceError",
    "TemplateAssetError",
    "remove_local_documents",
    "submit_registration",
]


def _unlink(path: Path) -> None:
    Path(path).unlink(missing_ok=True)


async def remove_local_documents(paths: list[Path]) -> None:
    """Delete temporary PDFs. Safe to call more than once."""
    for path in paths:
        try:
            await asyncio.to_thread(_unlink, path)
        except OSError as e:
            logger.warning(f"Could not delete temporary document {path}: {e}")


async def submit_registration(
    db: AsyncSession,
    services: RegistrationServices,
    data: RegistrationCreate,
) -> RegistrationSubmitResponse:
    """
    Process one registration submission.

    Args:
        db: Database session
        services: Pipeline collaborators created at startup
        data: Validated registration form

    Returns:
        RegistrationSubmitResponse with the assigned serial number

    Raises:
        TemplateAssetError: A template, stylesheet or logo is missing
        DocumentRenderError: The browser failed to produce a PDF
        DuplicateSerialError: The serial number was taken by a concurrent submission
        RegistrationPersistenceError: The registration could not be stored
    """
    serial_number = await services.allocator.next_serial_number(db)
    record = data.stamp(serial_number)

    logger.info(f"Processing registration {serial_number}")

    local_documents: list[Path] = []
    succeeded = False
    try:
        certificate_path = await services.renderer.render(DocumentKind.CERTIFICATE, record)
        local_documents.append(certificate_path)

        application_form_path = await services.renderer.render(
            DocumentKind.APPLICATION_FORM, record
        )
        local_documents.append(application_form_path)

        certificate_upload, application_upload = await asyncio.gather(
            services.uploader.upload(certificate_path, record.applicant_name),
            services.uploader.upload(application_form_path, record.applicant_name),
        )
        for kind, upload in (
            (DocumentKind.CERTIFICATE, certificate_upload),
            (DocumentKind.APPLICATION_FORM, application_upload),
        ):
            if not upload.ok:
                logger.warning(
                    f"UPLOAD_FAILED: {kind.value} for registration {serial_number} "
                    f"will be stored without a URL ({upload.error})"
                )

        try:
            await repository.create(
                db,
                record,
                certificate_url=certificate_upload.url,
                application_form_url=application_upload.url,
            )
        except DuplicateSerialNumberError as e:
            raise DuplicateSerialError(serial_number) from e
        except SQLAlchemyError as e:
            raise RegistrationPersistenceError(
                f"Could not save registration {serial_number}: {e}"
            ) from e
        logger.info(f"Saved registration {serial_number}")

        if not await send_student_confirmation(
            services.email_client, record, application_form_path
        ):
            logger.error(
                f"STUDENT_EMAIL_FAILED: no confirmation sent for registration {serial_number}"
            )

        queued = await services.queue.enqueue(
            PendingNotification(
                serial_number=serial_number,
                applicant_name=record.applicant_name,
                certificate_url=certificate_upload.url,
                application_form_url=application_upload.url,
            )
        )
        logger.info(f"Registration {serial_number} queued for the faculty batch ({queued} pending)")

        succeeded = True
    except RegistrationServiceError as e:
        logger.error(f"{e.error_code}: registration {serial_number} failed: {e.message}")
        raise
    finally:
        if succeeded or not services.settings.keep_failed_documents:
            await remove_local_documents(local_documents)
        elif local_documents:
            logger.info(
                f"Keeping documents of failed registration {serial_number}: {local_documents}"
            )

    return RegistrationSubmitResponse(serial_number=serial_number)
