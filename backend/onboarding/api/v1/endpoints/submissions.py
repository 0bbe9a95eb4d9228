from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from onboarding.models.onboarding import SubmissionAccepted
from onboarding.models.submission import Submission
from onboarding.services.onboarding_workflow import (
    DuplicateSubmissionError,
    ServiceNotConfiguredError,
    SubmissionRejectedError,
    onboarding_workflow,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.post(
    "/submissions",
    response_model=SubmissionAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def submit_onboarding(submission: Submission):
    try:
        request_id = onboarding_workflow.submit(submission)
    except SubmissionRejectedError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Validation failed", "details": e.errors, "requestId": e.request_id},
        ) from e
    except DuplicateSubmissionError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": "This submission has already been received",
                "details": (
                    "If you've already submitted this form, please contact HR at "
                    f"{onboarding_workflow.hr_contact_email} instead of resubmitting."
                ),
                "requestId": e.previous_request_id,
            },
        ) from e
    except ServiceNotConfiguredError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "API configuration error",
                "details": "The onboarding system is not properly configured. Please contact support.",
                "requestId": e.request_id,
            },
        ) from e

    return SubmissionAccepted(request_id=request_id)
