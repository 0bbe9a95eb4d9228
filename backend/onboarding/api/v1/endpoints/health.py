from __future__ import annotations

from fastapi import APIRouter

from onboarding.core.config import settings
from onboarding.services.notifier import notifier
from onboarding.services.onboarding_workflow import onboarding_workflow
from onboarding.services.talenox_client import talenox_client

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    services = {
        "talenox": "configured" if talenox_client.initialized else "not_configured",
        "email": "configured" if notifier.initialized else "not_configured",
    }

    return {
        "status": "healthy" if talenox_client.initialized else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "services": services,
        "workflows_in_flight": onboarding_workflow.in_flight,
    }


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}
