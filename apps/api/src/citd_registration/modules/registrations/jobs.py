"""
Registration Background Jobs

Faculty batch email: at each configured time of day the pending
submissions are sent to the faculty address as one email with links to
every student's documents and the full registrations workbook attached.

Design Principles:
- The job owns its database session
- Only a fully successful send removes entries from the pending queue
- A failed send keeps the queue and the workbook for the next tick
- A tick that fires while a previous flush is still running is skipped
- The job never raises; it returns a summary dict instead

Schedule:
- FACULTY_BATCH_TIMES (default 00:15 and 00:20) in FACULTY_BATCH_TIMEZONE
  (default Asia/Kolkata), combined into one job so runs never overlap
- The job can also be triggered manually via the debug endpoints
"""

import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import Any

from apscheduler.triggers.combining import OrTrigger
from apscheduler.triggers.cron import CronTrigger

from citd_registration.core.scheduler import register_job
from citd_registration.modules.registrations import repository
from citd_registration.modules.registrations.dependencies import RegistrationServices
from citd_registration.modules.registrations.export import build_registrations_workbook
from citd_registration.modules.registrations.notifications import send_faculty_batch

logger = logging.getLogger(__name__)

# Job ID for registration and manual triggering
JOB_ID_FACULTY_BATCH = "registrations_faculty_batch"


async def flush_faculty_batch(services: RegistrationServices) -> dict[str, Any]:
    """
    Send pending submissions to the faculty in one email.

    Returns:
        Dict with executed_at and status, one of:
        - skipped: another flush is still running
        - nothing_to_send: the queue was empty
        - sent: the email went out, with the number of entries sent
        - failed: the email or report failed, queue retained
    """
    executed_at = datetime.now(UTC)
    result: dict[str, Any] = {"executed_at": executed_at.isoformat()}

    async with services.queue.flush_slot() as acquired:
        if not acquired:
            logger.warning("Faculty batch already in progress, skipping this run")
            result["status"] = "skipped"
            return result

        items = await services.queue.snapshot()
        if not items:
            logger.info("No new registrations to send to faculty")
            result["status"] = "nothing_to_send"
            return result

        logger.info(f"Starting faculty batch for {len(items)} registration(s)")

        report_path = services.settings.output_dir / f"report-{time.time_ns()}.xlsx"
        try:
            async with services.session_maker() as db:
                registrations = await repository.list_all(db)

            await asyncio.to_thread(build_registrations_workbook, registrations, report_path)

            sent = await send_faculty_batch(
                services.email_client,
                to_email=services.settings.faculty_email,
                sender=services.settings.batch_email_from,
                items=items,
                report_path=report_path,
                timezone=services.settings.faculty_batch_timezone,
            )
        except Exception as e:
            logger.error(
                f"BATCH_EMAIL_FAILED: faculty batch failed, {len(items)} registration(s) kept: {e}",
                exc_info=True,
            )
            result.update(status="failed", pending=len(items), error=str(e))
            return result

        if not sent:
            logger.error(
                f"BATCH_EMAIL_FAILED: faculty email was not sent, "
                f"{len(items)} registration(s) kept; report left at {report_path}"
            )
            result.update(status="failed", pending=len(items), report=str(report_path))
            return result

        await services.queue.discard(len(items))
        report_path.unlink(missing_ok=True)

        logger.info(f"Faculty batch sent for {len(items)} registration(s)")
        result.update(status="sent", count=len(items))
        return result


def faculty_batch_trigger(schedule: list[tuple[int, int]], timezone: str) -> OrTrigger:
    """One trigger firing at every (hour, minute) in ``schedule``."""
    return OrTrigger(
        [CronTrigger(hour=hour, minute=minute, timezone=timezone) for hour, minute in schedule]
    )


def register_registration_jobs(services: RegistrationServices) -> None:
    """
    Register the faculty batch job with the scheduler.

    Call during application startup, before the scheduler is started.
    """
    settings = services.settings

    async def run_faculty_batch() -> dict[str, Any]:
        return await flush_faculty_batch(services)

    register_job(
        job_id=JOB_ID_FACULTY_BATCH,
        func=run_faculty_batch,
        trigger=faculty_batch_trigger(
            settings.faculty_batch_schedule, settings.faculty_batch_timezone
        ),
    )
    logger.info(
        f"Registered job: {JOB_ID_FACULTY_BATCH} "
        f"(at {settings.faculty_batch_times} {settings.faculty_batch_timezone})"
    )
