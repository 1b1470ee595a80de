"""
Registration Models

One row per student registration. Rows are written once by the submission
pipeline and never updated afterwards.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from citd_registration.core.database import Base


class Registration(Base):
    """
    A student's course registration.

    ``serial_number`` is the zero-padded registration identifier printed on
    the certificate; the unique constraint on it backs up the in-process
    serial allocator against concurrent submissions.
    """

    __tablename__ = "registrations"
    __table_args__ = (UniqueConstraint("serial_number", name="uq_registrations_serial_number"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    serial_number: Mapped[str] = mapped_column(String(20), nullable=False)

    # Course
    admission_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    sdmis_ref_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    course_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    department: Mapped[str | None] = mapped_column(String(200), nullable=True)
    duration: Mapped[str | None] = mapped_column(String(100), nullable=True)
    from_date: Mapped[str | None] = mapped_column(String(20), nullable=True)
    to_date: Mapped[str | None] = mapped_column(String(20), nullable=True)
    course_fees: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Applicant
    applicant_name: Mapped[str] = mapped_column(String(200), nullable=False)
    dob: Mapped[str | None] = mapped_column(String(20), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    father_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    mother_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    mobile: Mapped[str | None] = mapped_column(String(20), nullable=True)
    aadhar: Mapped[str | None] = mapped_column(String(20), nullable=True)
    caste_category: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Ordered list of {course, institution, specialization, year, percentage}
    education: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Null until the matching upload succeeds
    certificate_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    application_form_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"Registration(serial_number={self.serial_number!r}, "
            f"applicant_name={self.applicant_name!r})"
        )
