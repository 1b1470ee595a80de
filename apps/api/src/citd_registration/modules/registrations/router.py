"""
Registrations Router

Public endpoint used by the static application form. No authentication:
students submit the form directly.

Endpoints:
- POST /submit-form - Submit a registration

Security:
- Per-IP rate limiting (Redis, in-memory fallback)
- Input validation via Pydantic schemas
- HTML escaping of user input in documents and emails
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from citd_registration.core.database import get_db
from citd_registration.core.rate_limit import enforce_rate_limit
from citd_registration.modules.registrations import service
from citd_registration.modules.registrations.dependencies import (
    RegistrationServices,
    get_services,
)
from citd_registration.modules.registrations.schemas import (
    RegistrationCreate,
    RegistrationSubmitResponse,
    SubmissionErrorResponse,
)
from citd_registration.modules.registrations.service import RegistrationServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/submit-form",
    response_model=RegistrationSubmitResponse,
    status_code=status.HTTP_200_OK,
    summary="Submit Registration",
    description="""
Submit a short term course registration.

The submission is assigned a serial number, its certificate and application
form are generated and stored, and the student receives the application form
by email. The faculty receive the submission in the next batch report.

**Response:**
Returns the assigned serial number. Any failure returns a generic 500 body
with the error detail.
""",
    responses={
        200: {
            "description": "Registration processed",
            "model": RegistrationSubmitResponse,
        },
        429: {"description": "Rate limit exceeded"},
        500: {
            "description": "Registration failed",
            "model": SubmissionErrorResponse,
        },
    },
)
async def submit_form(
    request: Request,
    data: RegistrationCreate,
    db: AsyncSession = Depends(get_db),
    services: RegistrationServices = Depends(get_services),
) -> RegistrationSubmitResponse | JSONResponse:
    """Submit a registration form."""
    await enforce_rate_limit(
        request,
        limit=services.settings.submit_rate_limit,
        window_seconds=services.settings.submit_rate_limit_window_seconds,
    )

    try:
        return await service.submit_registration(db, services, data)
    except RegistrationServiceError as e:
        error = e.message
    except Exception as e:
        logger.error(f"Unexpected error processing registration: {e}", exc_info=True)
        error = str(e)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=SubmissionErrorResponse(error=error).model_dump(),
    )
