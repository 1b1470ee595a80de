"""
Registration Schemas

Pydantic schemas for the registration form. Incoming JSON uses the field
names of the public application form (``applicantName``, ``fatherName``,
``course_fees``, ...); Python code uses snake_case names.
"""

import re

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# Characters a spreadsheet cell cannot hold (tab, newline and CR are allowed)
_CONTROL_CHARACTERS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")
_PHOTO_DATA_URL = re.compile(r"^data:image/[a-z0-9.+-]+;base64,", re.IGNORECASE)

MAX_PHOTO_LENGTH = 5 * 1024 * 1024


def reject_control_characters(value):
    if isinstance(value, str) and _CONTROL_CHARACTERS.search(value):
        raise ValueError("must not contain control characters")
    return value


class EducationEntry(BaseModel):
    """One row of the education history table."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    course: str = Field("", max_length=200)
    institution: str = Field("", alias="school", max_length=300)
    specialization: str = Field("", alias="spec", max_length=200)
    year: str = Field("", max_length=10)
    percentage: str = Field("", alias="perc", max_length=20)

    @field_validator("*")
    @classmethod
    def no_control_characters(cls, value):
        return reject_control_characters(value)


class RegistrationCreate(BaseModel):
    """Request body for POST /api/submit-form."""

    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        str_strip_whitespace=True,
    )

    # Course
    admission_no: str | None = Field(None, max_length=50)
    sdmis_ref_no: str | None = Field(None, max_length=50)
    course_name: str = Field("", alias="courseName", max_length=200)
    department: str = Field("", max_length=200)
    duration: str = Field("", max_length=100)
    from_date: str = Field("", alias="fromDate", max_length=20)
    to_date: str = Field("", alias="toDate", max_length=20)
    course_fees: str = Field("", max_length=50)

    # Applicant
    applicant_name: str = Field("", alias="applicantName", max_length=200)
    dob: str = Field("", max_length=20)
    gender: str = Field("", max_length=20)
    father_name: str = Field("", alias="fatherName", max_length=200)
    mother_name: str = Field("", alias="motherName", max_length=200)
    address: str = Field("", max_length=1000)
    email: EmailStr | None = None
    mobile: str = Field("", max_length=20)
    aadhar: str = Field("", max_length=20)
    caste_category: str = Field("", alias="casteCategory", max_length=50)

    education: list[EducationEntry] = Field(default_factory=list)

    # Data URL of the applicant photo; rendered into the documents, not stored
    photo: str | None = Field(None, max_length=MAX_PHOTO_LENGTH)

    @field_validator("*")
    @classmethod
    def no_control_characters(cls, value):
        return reject_control_characters(value)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("photo", mode="before")
    @classmethod
    def photo_must_be_image_data_url(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if not isinstance(value, str) or not _PHOTO_DATA_URL.match(value.strip()):
            raise ValueError("photo must be a data:image/...;base64 URL")
        return value

    def stamp(self, serial_number: str) -> "StampedRegistration":
        """Attach the allocated serial number."""
        return StampedRegistration(**self.model_dump(), serial_number=serial_number)


class StampedRegistration(RegistrationCreate):
    """A registration that has been assigned its serial number."""

    serial_number: str


class RegistrationSubmitResponse(BaseModel):
    """Response after a successful submission."""

    message: str = "Registration successful!"
    serial_number: str


class SubmissionErrorResponse(BaseModel):
    """Generic failure body for POST /api/submit-form."""

    message: str = "An error occurred on the server."
    error: str
