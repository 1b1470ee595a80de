"""
Unit tests for the background job scheduler.
"""

from unittest.mock import AsyncMock

import pytest
from apscheduler.triggers.interval import IntervalTrigger

from citd_registration.core import scheduler


@pytest.fixture(autouse=True)
def clean_registry():
    scheduler.clear_registry()
    yield
    scheduler.clear_registry()


class TestScheduler:
    """Tests for job registration and lifecycle."""

    @pytest.mark.asyncio
    async def test_registered_jobs_are_scheduled_on_start(self):
        scheduler.register_job("job_a", AsyncMock(), IntervalTrigger(hours=1))

        await scheduler.start_scheduler()
        try:
            jobs = scheduler.list_registered_jobs()
            assert jobs[0]["job_id"] == "job_a"
            assert jobs[0]["next_run_time"] is not None
            assert jobs[0]["is_paused"] is False

            assert scheduler.pause_job("job_a") is True
            assert scheduler.list_registered_jobs()[0]["is_paused"] is True
            assert scheduler.resume_job("job_a") is True
        finally:
            await scheduler.stop_scheduler()

        assert scheduler.get_scheduler() is None

    @pytest.mark.asyncio
    async def test_trigger_unknown_job_raises(self):
        with pytest.raises(ValueError):
            await scheduler.trigger_job_manually("missing")

    @pytest.mark.asyncio
    async def test_trigger_job_reports_failure(self):
        scheduler.register_job(
            "job_b", AsyncMock(side_effect=RuntimeError("boom")), IntervalTrigger(hours=1)
        )

        result = await scheduler.trigger_job_manually("job_b")

        assert result["status"] == "error"
        assert result["error"] == "boom"

    def test_pause_without_scheduler(self):
        assert scheduler.pause_job("job_a") is False
