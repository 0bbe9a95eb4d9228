from __future__ import annotations

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from onboarding.main import app
from onboarding.services.notifier import notifier
from onboarding.services.submission_dedup import submission_deduplicator
from onboarding.services.talenox_client import talenox_client

VALID_INTERN_PAYLOAD: dict[str, Any] = {
    "employeeType": "intern_school",
    "fullName": "Test Intern",
    "email": "test.intern@example.com",
    "nric": "T9876543B",
    "nationality": "Singaporean",
    "citizenshipStatus": "sg_pr",
    "dob": "2000-06-20",
    "gender": "female",
    "startDate": "2025-02-01",
    "endDate": "2025-05-31",
    "bank": "OCBC",
    "accountName": "Test Intern",
    "accountNumber": "9876543210",
}


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _reset_singletons():
    submission_deduplicator.clear()
    yield
    submission_deduplicator.clear()
    talenox_client.initialized = False
    notifier.initialized = False


@pytest.fixture
def valid_payload() -> dict[str, Any]:
    return dict(VALID_INTERN_PAYLOAD)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def configured_client():
    """Client whose Talenox client counts as configured; no real calls are made."""
    talenox_client.initialized = True
    with TestClient(app) as c:
        talenox_client.initialized = True
        yield c


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
