from fastapi import APIRouter

from onboarding.api.v1.endpoints import health, submissions

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router)
api_router.include_router(submissions.router)
