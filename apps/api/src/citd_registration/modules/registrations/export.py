"""
Registrations Spreadsheet Export

Writes every registration to a single-sheet .xlsx workbook for the faculty
batch email. The column order is a fixed contract with the faculty office.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import NamedTuple

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from citd_registration.modules.registrations.models import Registration

logger = logging.getLogger(__name__)

WORKSHEET_TITLE = "Registrations"
REPORT_ATTACHMENT_NAME = "Master_Registration_Report.xlsx"


class ReportColumn(NamedTuple):
    header: str
    attribute: str
    width: int


REPORT_COLUMNS: tuple[ReportColumn, ...] = (
    ReportColumn("Serial No", "serial_number", 15),
    ReportColumn("Submission Date", "submitted_at", 25),
    ReportColumn("Applicant Name", "applicant_name", 30),
    ReportColumn("Course Name", "course_name", 40),
    ReportColumn("Department", "department", 20),
    ReportColumn("Duration", "duration", 15),
    ReportColumn("From Date", "from_date", 15),
    ReportColumn("To Date", "to_date", 15),
    ReportColumn("Email", "email", 30),
    ReportColumn("Mobile", "mobile", 20),
    ReportColumn("Gender", "gender", 10),
    ReportColumn("Date of Birth", "dob", 15),
    ReportColumn("Father Name", "father_name", 30),
    ReportColumn("Mother Name", "mother_name", 30),
    ReportColumn("Address", "address", 50),
    ReportColumn("Aadhar", "aadhar", 20),
    ReportColumn("Caste Category", "caste_category", 20),
    ReportColumn("Course Fees", "course_fees", 15),
    ReportColumn("Certificate URL", "certificate_url", 50),
    ReportColumn("Application URL", "application_form_url", 50),
)


def _cell_value(value):
    # Excel cannot store timezone-aware datetimes or control characters
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.replace(tzinfo=None)
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def registration_row(registration: Registration) -> list:
    return [_cell_value(getattr(registration, column.attribute, None)) for column in REPORT_COLUMNS]


def build_registrations_workbook(registrations: list[Registration], path: Path) -> Path:
    """
    Write the registrations report to ``path``.

    Returns:
        The path written
    """
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = WORKSHEET_TITLE

    sheet.append([column.header for column in REPORT_COLUMNS])
    for cell in sheet[1]:
        cell.font = Font(bold=True)

    for index, column in enumerate(REPORT_COLUMNS, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = column.width

    for registration in registrations:
        sheet.append(registration_row(registration))
        # Applicant text is never a formula
        for cell in sheet[sheet.max_row]:
            if cell.data_type == "f":
                cell.data_type = "s"

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)

    logger.info(f"Wrote registrations report with {len(registrations)} row(s) to {path}")
    return path
