"""
Unit tests for the registrations spreadsheet export.
"""

from datetime import datetime

from openpyxl import load_workbook

from citd_registration.modules.registrations.export import (
    REPORT_COLUMNS,
    WORKSHEET_TITLE,
    build_registrations_workbook,
    registration_row,
)

EXPECTED_HEADERS = [
    "Serial No",
    "Submission Date",
    "Applicant Name",
    "Course Name",
    "Department",
    "Duration",
    "From Date",
    "To Date",
    "Email",
    "Mobile",
    "Gender",
    "Date of Birth",
    "Father Name",
    "Mother Name",
    "Address",
    "Aadhar",
    "Caste Category",
    "Course Fees",
    "Certificate URL",
    "Application URL",
]


class TestReportColumns:
    """The column layout is a fixed contract with the faculty office."""

    def test_column_order(self):
        assert [column.header for column in REPORT_COLUMNS] == EXPECTED_HEADERS


class TestBuildRegistrationsWorkbook:
    """Tests for build_registrations_workbook."""

    def test_workbook_contents(self, sample_registration_model, tmp_path):
        path = build_registrations_workbook([sample_registration_model], tmp_path / "report.xlsx")

        sheet = load_workbook(path).active
        assert sheet.title == WORKSHEET_TITLE
        assert [cell.value for cell in sheet[1]] == EXPECTED_HEADERS
        assert sheet["A1"].font.bold

        row = [cell.value for cell in sheet[2]]
        assert row[0] == "000819"
        assert row[1] == datetime(2024, 5, 7, 10, 30)
        assert row[2] == "Ravi Kumar"
        assert row[18] == "https://cdn.example.com/citd-forms/Ravi_Kumar_Certificate.pdf"
        # Failed upload leaves the application URL empty
        assert row[19] is None
        assert sheet.max_row == 2

    def test_empty_report_has_header_only(self, tmp_path):
        path = build_registrations_workbook([], tmp_path / "nested" / "report.xlsx")

        sheet = load_workbook(path).active
        assert sheet.max_row == 1

    def test_registration_row_strips_timezone(self, sample_registration_model):
        row = registration_row(sample_registration_model)
        assert row[1].tzinfo is None

    def test_control_characters_are_removed(self, sample_registration_model, tmp_path):
        """A stored control character does not break the report."""
        sample_registration_model.address = "Flat 1\x0bRoad"

        path = build_registrations_workbook([sample_registration_model], tmp_path / "report.xlsx")

        sheet = load_workbook(path).active
        assert sheet["O2"].value == "Flat 1Road"

    def test_applicant_text_is_not_a_formula(self, sample_registration_model, tmp_path):
        """Values starting with "=" are written as plain text."""
        sample_registration_model.applicant_name = '=HYPERLINK("http://evil","x")'

        path = build_registrations_workbook([sample_registration_model], tmp_path / "report.xlsx")

        sheet = load_workbook(path).active
        assert sheet["C2"].data_type == "s"
        assert sheet["C2"].value == '=HYPERLINK("http://evil","x")'
