"""Workflow outcome and API response models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class WorkflowState(StrEnum):
    RECEIVED = "received"
    VALIDATED = "validated"
    REJECTED = "rejected"
    PERSON_CREATED = "person_created"
    JOB_CREATED = "job_created"
    JOB_FAILED = "job_failed"
    NOTIFIED = "notified"
    DONE = "done"
    FAILED = "failed"


class ErrorType(StrEnum):
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    DUPLICATE = "duplicate"
    DOWNSTREAM = "downstream"
    PARTIAL = "partial"
    SYSTEM = "system"


class WorkflowOutcome(BaseModel):
    """Result of one background onboarding run."""

    success: bool
    request_id: str
    category: str | None = None
    state: WorkflowState
    employee_id: str | None = None
    internal_employee_id: str | None = None
    job_id: str | None = None
    job_created: bool = False
    error_type: ErrorType | None = None
    error_message: str | None = None


class SubmissionAccepted(BaseModel):
    """Acknowledgement returned before the background workflow runs."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = (
        "Your submission has been accepted and is being processed. "
        "You will receive a confirmation email shortly."
    )
    request_id: str = Field(..., alias="requestId")
