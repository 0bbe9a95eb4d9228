from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from onboarding.models.onboarding import WorkflowOutcome, WorkflowState
from onboarding.services.onboarding_workflow import onboarding_workflow

SUBMIT_URL = "/api/v1/onboarding/submissions"


@pytest.fixture
def patched_run():
    done = WorkflowOutcome(success=True, request_id="x", state=WorkflowState.DONE)
    with patch.object(onboarding_workflow, "run", AsyncMock(return_value=done)) as run:
        yield run


def test_valid_submission_is_accepted(configured_client, patched_run, valid_payload):
    response = configured_client.post(SUBMIT_URL, json=valid_payload)

    assert response.status_code == 202
    data = response.json()
    assert data["success"] is True
    assert data["requestId"].startswith("req_")
    assert "being processed" in data["message"]


def test_background_run_receives_request_id(valid_payload, patched_run):
    from starlette.testclient import TestClient

    from onboarding.main import app
    from onboarding.services.talenox_client import talenox_client

    talenox_client.initialized = True
    with TestClient(app) as c:
        response = c.post(SUBMIT_URL, json=valid_payload)
    # Leaving the context drains background workflows

    patched_run.assert_awaited_once()
    submission, request_id = patched_run.await_args.args
    assert request_id == response.json()["requestId"]
    assert submission.nric == "T9876543B"


def test_invalid_submission_returns_itemized_errors(configured_client, patched_run, valid_payload):
    payload = {**valid_payload, "accountNumber": "12a45"}

    response = configured_client.post(SUBMIT_URL, json=payload)

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "Validation failed"
    assert detail["details"] == ["Account number must contain only digits"]
    assert detail["requestId"].startswith("req_")
    patched_run.assert_not_awaited()


@pytest.mark.parametrize(
    "overrides",
    [
        {"requiresSHG": None},
        {"requiresSHG": ""},
        {"accountNumber": 9876543210},
        {"requiresSHG": None, "accountNumber": 9876543210},
    ],
)
def test_loosely_typed_form_values_are_accepted(configured_client, patched_run, valid_payload, overrides):
    response = configured_client.post(SUBMIT_URL, json={**valid_payload, **overrides})

    assert response.status_code == 202
    assert response.json()["success"] is True


def test_loosely_typed_values_still_get_itemized_errors(configured_client, patched_run, valid_payload):
    payload = {
        **valid_payload,
        "requiresSHG": None,
        "accountNumber": -42,
        "startDate": "2025-13-01",
    }

    response = configured_client.post(SUBMIT_URL, json=payload)

    assert response.status_code == 400
    assert response.json()["detail"]["details"] == [
        "Start date must be a valid date (YYYY-MM-DD)",
        "Account number must contain only digits",
    ]
    patched_run.assert_not_awaited()


def test_duplicate_submission_is_refused(configured_client, patched_run, valid_payload):
    first = configured_client.post(SUBMIT_URL, json=valid_payload)
    second = configured_client.post(SUBMIT_URL, json=valid_payload)

    assert first.status_code == 202
    assert second.status_code == 409
    detail = second.json()["detail"]
    assert detail["requestId"] == first.json()["requestId"]
    assert "contact HR" in detail["details"]


def test_unconfigured_service_returns_503(client, patched_run, valid_payload):
    response = client.post(SUBMIT_URL, json=valid_payload)

    assert response.status_code == 503
    assert response.json()["detail"]["error"] == "API configuration error"
    patched_run.assert_not_awaited()


@pytest.mark.anyio
async def test_accepts_snake_case_keys(async_client, patched_run, valid_payload):
    from onboarding.services.talenox_client import talenox_client

    talenox_client.initialized = True
    payload = {
        "employee_type": "fulltime",
        "full_name": "Test Fulltime",
        "email": "test.fulltime@example.com",
        "nric": "G1122334C",
        "nationality": "Malaysian",
        "citizenship_status": "other",
        "dob": "1985-03-10",
        "gender": "male",
        "start_date": "2025-02-15",
        "bank": "UOB",
        "account_name": "Test Fulltime",
        "account_number": "5555666677",
    }

    response = await async_client.post(SUBMIT_URL, json=payload)
    await onboarding_workflow.shutdown()

    assert response.status_code == 202
