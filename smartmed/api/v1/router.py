from fastapi import APIRouter

from smartmed.api.v1.endpoints import (
    auth,
    dashboard,
    patients,
    readings,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(patients.router, prefix="/patients", tags=["patients"])
api_router.include_router(readings.router, prefix="/readings", tags=["readings"])
