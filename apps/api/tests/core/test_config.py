"""
Unit tests for application settings.
"""

import pytest
from pydantic import ValidationError

from citd_registration.core.config import Settings


class TestSettings:
    """Tests for Settings parsing and derived properties."""

    def test_default_faculty_batch_schedule(self):
        settings = Settings(_env_file=None)
        assert settings.faculty_batch_schedule == [(0, 15), (0, 20)]
        assert settings.faculty_batch_timezone == "Asia/Kolkata"

    def test_custom_faculty_batch_times(self):
        settings = Settings(_env_file=None, faculty_batch_times="09:00, 17:30,")
        assert settings.faculty_batch_schedule == [(9, 0), (17, 30)]

    @pytest.mark.parametrize("value", ["9am", "24:00", "12:60", "12-30"])
    def test_invalid_faculty_batch_times(self, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, faculty_batch_times=value)

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_origins="https://a.in, https://b.in")
        assert settings.cors_origins_list == ["https://a.in", "https://b.in"]

    def test_environment_flags(self):
        assert Settings(_env_file=None, python_env="production").is_production
        assert Settings(_env_file=None, python_env="development").is_development
