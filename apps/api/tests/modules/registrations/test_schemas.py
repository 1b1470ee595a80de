"""
Unit tests for the registration request schemas.
"""

import pytest
from pydantic import ValidationError

from citd_registration.modules.registrations.schemas import MAX_PHOTO_LENGTH, RegistrationCreate

PHOTO = "data:image/png;base64,iVBORw0KGgo="


class TestRegistrationCreate:
    """Tests for RegistrationCreate validation."""

    def test_form_aliases(self, sample_form):
        data = RegistrationCreate.model_validate(sample_form)

        assert data.applicant_name == "Ravi Kumar"
        assert data.education[0].institution == "JNTU Hyderabad"
        assert data.education[0].specialization == "Mechanical"
        assert data.photo is None

    def test_blank_email_is_none(self, sample_form):
        sample_form["email"] = "  "
        assert RegistrationCreate.model_validate(sample_form).email is None

    def test_control_characters_rejected(self, sample_form):
        """Control characters would make the faculty report unwritable."""
        sample_form["address"] = "Flat 1\x0bRoad"

        with pytest.raises(ValidationError) as exc_info:
            RegistrationCreate.model_validate(sample_form)

        assert exc_info.value.errors()[0]["loc"] == ("address",)

    def test_control_characters_rejected_in_education(self, sample_form):
        sample_form["education"][0]["school"] = "JNTU\x00"

        with pytest.raises(ValidationError):
            RegistrationCreate.model_validate(sample_form)

    def test_multiline_address_allowed(self, sample_form):
        sample_form["address"] = "12 Balanagar\nHyderabad"
        assert RegistrationCreate.model_validate(sample_form).address == "12 Balanagar\nHyderabad"


class TestPhoto:
    """The photo must be an inline image so rendering never fetches a URL."""

    def test_image_data_url_accepted(self, sample_form):
        sample_form["photo"] = PHOTO
        assert RegistrationCreate.model_validate(sample_form).photo == PHOTO

    def test_empty_photo_is_none(self, sample_form):
        sample_form["photo"] = ""
        assert RegistrationCreate.model_validate(sample_form).photo is None

    @pytest.mark.parametrize(
        "photo",
        [
            "http://169.254.169.254/latest/meta-data/",
            "https://example.com/photo.png",
            "file:///etc/passwd",
            "data:text/html;base64,PHNjcmlwdD4=",
        ],
    )
    def test_other_urls_rejected(self, sample_form, photo):
        sample_form["photo"] = photo

        with pytest.raises(ValidationError):
            RegistrationCreate.model_validate(sample_form)

    def test_oversized_photo_rejected(self, sample_form):
        sample_form["photo"] = PHOTO + "A" * MAX_PHOTO_LENGTH

        with pytest.raises(ValidationError):
            RegistrationCreate.model_validate(sample_form)
