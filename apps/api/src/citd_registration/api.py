from fastapi import APIRouter

from citd_registration.modules.registrations import router as registrations_router

api_router = APIRouter()

api_router.include_router(registrations_router, tags=["Registrations"])
