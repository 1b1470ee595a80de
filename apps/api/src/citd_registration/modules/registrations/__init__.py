"""
Registrations Module

Handles the short term course registration workflow:
1. Serial number allocation
2. Certificate and application form PDF generation (Playwright)
3. Upload of both documents to object storage
4. Persistence of the registration
5. Student confirmation email with the application form attached
6. Faculty batch email with document links and the registrations workbook

API Endpoints:
- POST /api/submit-form - Submit a registration

Background Jobs (via APScheduler):
- registrations_faculty_batch: Runs at FACULTY_BATCH_TIMES, sends the
  pending submissions to the faculty
"""

from .jobs import register_registration_jobs
from .router import router

__all__ = ["router", "register_registration_jobs"]
