"""
CITD Registration API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Rate limiter (Redis) and database connections
- Registration services (browser, storage, email, pending queue)
- Background job scheduler
- CORS middleware, API routing and the static application form
- Health check endpoints
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text

from citd_registration.api import api_router
from citd_registration.core.config import settings
from citd_registration.core.database import async_session_maker, close_db, init_db
from citd_registration.core.logging_config import configure_logging
from citd_registration.core.rate_limit import RateLimiter
from citd_registration.core.scheduler import (
    clear_registry,
    list_registered_jobs,
    pause_job,
    resume_job,
    start_scheduler,
    stop_scheduler,
    trigger_job_manually,
)
from citd_registration.modules.registrations import register_registration_jobs
from citd_registration.modules.registrations.dependencies import build_services

APPLICATION_FORM_PATH = "/application_form/index.html"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events including:
    - Redis connection for rate limiting
    - Database connection
    - Headless browser for document rendering
    - Background job scheduler
    """
    # Startup
    configure_logging(settings.log_level)
    print(f"Starting CITD Registration API in {settings.python_env} mode...")

    # Initialize Redis
    rate_limiter = RateLimiter(settings.redis_url)
    try:
        await rate_limiter.connect()
        print("[OK] Redis connected")
    except Exception as e:
        print(f"[FAIL] Redis connection failed, rate limiting in memory: {e}")
        if settings.is_production:
            raise
    app.state.rate_limiter = rate_limiter

    # Initialize Database
    try:
        await init_db()
        print("[OK] Database connected")
    except Exception as e:
        print(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    # Initialize registration services
    services = build_services(settings, async_session_maker)
    try:
        await services.start()
        print("[OK] Document renderer started")
    except Exception as e:
        print(f"[FAIL] Document renderer failed to start, will retry on first render: {e}")
        if settings.is_production:
            raise
    app.state.registration_services = services

    # Initialize Background Job Scheduler
    try:
        clear_registry()
        register_registration_jobs(services)
        await start_scheduler()
        print("[OK] Background scheduler started")
    except Exception as e:
        print(f"[FAIL] Background scheduler failed to start: {e}")
        if settings.is_production:
            raise

    yield  # Application runs here

    # Shutdown
    print("Shutting down CITD Registration API...")

    # Stop the scheduler first (wait for running jobs)
    await stop_scheduler()
    print("[OK] Background scheduler stopped")

    await services.close()
    await rate_limiter.close()
    await close_db()
    print("[OK] Cleanup complete")


app = FastAPI(
    title="CITD Registration API",
    description="CITD short term course registration API",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"], include_in_schema=False)
async def root() -> RedirectResponse:
    """Redirect to the application form."""
    return RedirectResponse(url=APPLICATION_FORM_PATH)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check endpoint."""
    return {"status": "ready"}


@app.get("/debug/db", tags=["Debug"])
async def debug_db():
    """Test database connection."""
    try:
        async with async_session_maker() as session:
            result = await session.execute(text("SELECT 1"))
            return {"database": "connected", "result": result.scalar()}
    except Exception as e:
        return {"database": "error", "message": str(e)}


@app.get("/debug/redis", tags=["Debug"])
async def debug_redis():
    """Test Redis connection."""
    rate_limiter: RateLimiter | None = getattr(app.state, "rate_limiter", None)
    try:
        if rate_limiter is not None and rate_limiter.redis is not None:
            await rate_limiter.redis.ping()
            return {"redis": "connected"}
        return {"redis": "not initialized"}
    except Exception as e:
        return {"redis": "error", "message": str(e)}


# ============================================
# Background Job Debug Endpoints
# ============================================
# Manual control of the faculty batch job. In production the job runs
# automatically on schedule.


@app.get("/debug/jobs", tags=["Debug"])
async def list_jobs():
    """
    List all registered background jobs and their status.

    Returns:
        List of job information including next run time and pause status.
    """
    return {"jobs": list_registered_jobs()}


@app.post("/debug/jobs/{job_id}/trigger", tags=["Debug"])
async def trigger_job(job_id: str):
    """
    Manually trigger a background job.

    Args:
        job_id: The ID of the job to trigger. Available jobs:
            - registrations_faculty_batch

    Returns:
        Job execution result including status and any errors.

    Raises:
        HTTPException 400: If job_id is not found.
    """
    try:
        return await trigger_job_manually(job_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@app.post("/debug/jobs/{job_id}/pause", tags=["Debug"])
async def pause_job_endpoint(job_id: str):
    """Pause a scheduled background job."""
    success = pause_job(job_id)
    return {"job_id": job_id, "paused": success}


@app.post("/debug/jobs/{job_id}/resume", tags=["Debug"])
async def resume_job_endpoint(job_id: str):
    """Resume a paused background job."""
    success = resume_job(job_id)
    return {"job_id": job_id, "resumed": success}


# Static application form and document templates; mounted last so the
# routes above take precedence
if settings.templates_dir.is_dir():
    app.mount("/", StaticFiles(directory=settings.templates_dir), name="templates")
