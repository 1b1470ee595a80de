"""
Registrations Repository

Database operations for registrations. Single responsibility: data access
only, no business logic.
"""

import logging

from sqlalchemy import Integer, cast, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Registration
from .schemas import StampedRegistration

logger = logging.getLogger(__name__)


class DuplicateSerialNumberError(ValueError):
    """Raised when a registration with the same serial number already exists."""

    def __init__(self, serial_number: str):
        self.serial_number = serial_number
        super().__init__(f"Serial number {serial_number} is already taken")


async def create(
    db: AsyncSession,
    data: StampedRegistration,
    certificate_url: str | None,
    application_form_url: str | None,
) -> Registration:
    """
    Persist a stamped registration.

    Raises:
        DuplicateSerialNumberError: If the serial number already exists
    """
    registration = Registration(
        serial_number=data.serial_number,
        # Course
        admission_no=data.admission_no,
        sdmis_ref_no=data.sdmis_ref_no,
        course_name=data.course_name,
        department=data.department,
        duration=data.duration,
        from_date=data.from_date,
        to_date=data.to_date,
        course_fees=data.course_fees,
        # Applicant
        applicant_name=data.applicant_name,
        dob=data.dob,
        gender=data.gender,
        father_name=data.father_name,
        mother_name=data.mother_name,
        address=data.address,
        email=data.email,
        mobile=data.mobile,
        aadhar=data.aadhar,
        caste_category=data.caste_category,
        education=[entry.model_dump() for entry in data.education],
        # Documents
        certificate_url=certificate_url,
        application_form_url=application_form_url,
    )

    db.add(registration)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if "serial_number" in str(e.orig):
            raise DuplicateSerialNumberError(data.serial_number) from e
        raise
    await db.refresh(registration)

    return registration


async def get_max_serial_number(db: AsyncSession) -> str | None:
    """Return the numerically highest stored serial number, or None when empty."""
    result = await db.execute(
        select(Registration.serial_number)
        .where(Registration.serial_number.regexp_match("^[0-9]+$"))
        .order_by(cast(Registration.serial_number, Integer).desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_by_serial_number(db: AsyncSession, serial_number: str) -> Registration | None:
    result = await db.execute(
        select(Registration).where(Registration.serial_number == serial_number)
    )
    return result.scalar_one_or_none()


async def list_all(db: AsyncSession) -> list[Registration]:
    """All registrations ordered by serial number, for the spreadsheet export."""
    result = await db.execute(select(Registration).order_by(Registration.serial_number))
    return list(result.scalars().all())
