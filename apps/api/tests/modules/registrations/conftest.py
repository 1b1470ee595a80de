"""
Fixtures for registrations tests.
"""

import copy
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from citd_registration.core.config import Settings
from citd_registration.core.storage import UploadResult
from citd_registration.modules.registrations.dependencies import RegistrationServices
from citd_registration.modules.registrations.models import Registration
from citd_registration.modules.registrations.queue import PendingQueue
from citd_registration.modules.registrations.schemas import RegistrationCreate

SAMPLE_FORM = {
    "admission_no": "ADM-42",
    "courseName": "CNC Programming",
    "department": "Tool Design",
    "duration": "4 Weeks",
    "fromDate": "2024-05-07",
    "toDate": "2024-06-03",
    "course_fees": "5000",
    "applicantName": "Ravi Kumar",
    "dob": "2002-01-15",
    "gender": "Mr.",
    "fatherName": "Suresh Kumar",
    "motherName": "Lakshmi Devi",
    "address": "12 Balanagar, Hyderabad",
    "email": "ravi.kumar@gmail.com",
    "mobile": "9876543210",
    "aadhar": "123412341234",
    "casteCategory": "OBC",
    "education": [
        {
            "course": "B.Tech",
            "school": "JNTU Hyderabad",
            "spec": "Mechanical",
            "year": "2023",
            "perc": "78",
        }
    ],
}


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def sample_form():
    """The JSON body posted by the application form."""
    return copy.deepcopy(SAMPLE_FORM)


@pytest.fixture
def sample_registration_create():
    """A registration as posted by the application form."""
    return RegistrationCreate.model_validate(SAMPLE_FORM)


@pytest.fixture
def sample_record(sample_registration_create):
    """The sample registration stamped with the first serial number."""
    return sample_registration_create.stamp("000819")


@pytest.fixture
def sample_registration_model():
    """A stored registration row."""
    return Registration(
        id=uuid4(),
        serial_number="000819",
        admission_no="ADM-42",
        course_name="CNC Programming",
        department="Tool Design",
        duration="4 Weeks",
        from_date="2024-05-07",
        to_date="2024-06-03",
        course_fees="5000",
        applicant_name="Ravi Kumar",
        dob="2002-01-15",
        gender="Mr.",
        father_name="Suresh Kumar",
        mother_name="Lakshmi Devi",
        address="12 Balanagar, Hyderabad",
        email="ravi.kumar@gmail.com",
        mobile="9876543210",
        aadhar="123412341234",
        caste_category="OBC",
        education=[],
        certificate_url="https://cdn.example.com/citd-forms/Ravi_Kumar_Certificate.pdf",
        application_form_url=None,
        submitted_at=datetime(2024, 5, 7, 10, 30, tzinfo=UTC),
    )


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing the output directory at a temporary path."""
    return Settings(
        _env_file=None,
        output_dir=tmp_path / "output",
        resend_api_key=None,
        faculty_email="faculty@example.com",
        batch_email_from="CITD Registration System <batch@example.com>",
        faculty_batch_times="00:15,00:20",
        faculty_batch_timezone="Asia/Kolkata",
        keep_failed_documents=False,
    )


@pytest.fixture
def mock_session_maker(mock_db):
    """Session factory whose sessions are ``mock_db``."""
    session_cm = MagicMock()
    session_cm.__aenter__ = AsyncMock(return_value=mock_db)
    session_cm.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session_cm)


@pytest.fixture
def mock_services(test_settings, mock_session_maker, tmp_path):
    """Registration services with every external collaborator mocked."""
    certificate = tmp_path / "Certificate-Ravi_Kumar-1.pdf"
    application = tmp_path / "Application-Ravi_Kumar-1.pdf"
    certificate.write_bytes(b"%PDF-1.4 certificate")
    application.write_bytes(b"%PDF-1.4 application")

    renderer = MagicMock()
    renderer.render = AsyncMock(side_effect=[certificate, application])
    renderer.start = AsyncMock()
    renderer.close = AsyncMock()

    async def upload(local_path, owner_name):
        key = f"citd-forms/Ravi_Kumar_{local_path.name}"
        return UploadResult(key=key, url=f"https://cdn.example.com/{key}")

    uploader = MagicMock()
    uploader.upload = AsyncMock(side_effect=upload)

    email_client = MagicMock()
    email_client.send = AsyncMock(return_value=True)

    allocator = MagicMock()
    allocator.next_serial_number = AsyncMock(return_value="000819")

    return RegistrationServices(
        settings=test_settings,
        session_maker=mock_session_maker,
        renderer=renderer,
        uploader=uploader,
        email_client=email_client,
        queue=PendingQueue(),
        allocator=allocator,
    )
