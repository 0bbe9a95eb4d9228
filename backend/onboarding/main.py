from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from onboarding.api.v1.router import api_router
from onboarding.core.config import settings
from onboarding.services.notifier import notifier
from onboarding.services.onboarding_workflow import onboarding_workflow
from onboarding.services.talenox_client import talenox_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    try:
        await talenox_client.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize TalenoxClient — submissions will be refused")
    try:
        await notifier.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize Notifier — continuing without email")
    onboarding_workflow.configure(settings)
    yield
    await onboarding_workflow.shutdown()
    await talenox_client.close()
    await notifier.close()


app = FastAPI(
    title="Onboarding Intake API",
    description="Employee onboarding intake and Talenox provisioning",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

_origins = settings.allowed_origins()
if settings.is_production and not _origins:
    logger.error("ALLOWED_ORIGINS not configured — cross-origin requests will be rejected")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials="*" not in _origins,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Onboarding Intake API"}
