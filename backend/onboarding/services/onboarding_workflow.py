"""Onboarding workflow: validate, create the Talenox person, then job and emails.

The synchronous part (``accept``) decides whether a submission is taken on.
Everything after the acknowledgement happens in ``run``, which is scheduled
as a detached task and reports only through logs and notification emails.

States: received -> validated -> person_created -> job_created | job_failed
-> notified -> done, with ``rejected`` for invalid input and ``failed`` for
any step that cannot continue.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import string
import time
from datetime import date
from typing import Any, Callable

from onboarding.core.config import Settings, settings
from onboarding.core.redaction import redact_submission
from onboarding.models.onboarding import ErrorType, WorkflowOutcome, WorkflowState
from onboarding.models.submission import Submission
from onboarding.models.talenox import PersonRecord
from onboarding.services.employee_id_allocator import EmployeeIdAllocator, employee_id_allocator
from onboarding.services.notifier import Notifier, notifier
from onboarding.services.submission_dedup import SubmissionDeduplicator, submission_deduplicator
from onboarding.services.talenox_client import (
    TalenoxAPIError,
    TalenoxClient,
    TalenoxNotConfiguredError,
    created_person_id,
    talenox_client,
)
from onboarding.services.transformer import build_job_record, build_person_record
from onboarding.services.validator import validate_submission

logger = logging.getLogger(__name__)

_REQUEST_ID_ALPHABET = string.ascii_lowercase + string.digits
RAW_RESPONSE_EXCERPT = 500


class SubmissionRejectedError(Exception):
    def __init__(self, request_id: str, errors: list[str]) -> None:
        self.request_id = request_id
        self.errors = errors
        super().__init__(f"Validation failed: {'; '.join(errors)}")


class ServiceNotConfiguredError(Exception):
    def __init__(self, request_id: str) -> None:
        self.request_id = request_id
        super().__init__("Talenox API is not properly configured")


class DuplicateSubmissionError(Exception):
    def __init__(self, request_id: str, previous_request_id: str) -> None:
        self.request_id = request_id
        self.previous_request_id = previous_request_id
        super().__init__(f"Submission already received as {previous_request_id}")


def new_request_id() -> str:
    suffix = "".join(secrets.choice(_REQUEST_ID_ALPHABET) for _ in range(7))
    return f"req_{int(time.time() * 1000)}_{suffix}"


class OnboardingWorkflow:
    def __init__(
        self,
        client: TalenoxClient | None = None,
        allocator: EmployeeIdAllocator | None = None,
        mailer: Notifier | None = None,
        deduplicator: SubmissionDeduplicator | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.client = client or talenox_client
        self.allocator = allocator or employee_id_allocator
        self.notifier = mailer or notifier
        self.deduplicator = deduplicator or submission_deduplicator
        self.today = today
        self.hr_contact_email = settings.HR_CONTACT_EMAIL
        self._tasks: set[asyncio.Task[WorkflowOutcome]] = set()

    def configure(self, settings: Settings) -> None:
        self.hr_contact_email = settings.HR_CONTACT_EMAIL
        self.allocator.configure(settings)
        self.deduplicator.configure(settings)

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def accept(self, submission: Submission) -> str:
        """Run the checks that must pass before acknowledging a submission.

        Returns the correlation id for the accepted submission.
        """
        request_id = new_request_id()
        logger.info("[%s] New submission request received", request_id)

        errors = validate_submission(submission)
        if errors:
            logger.info("[%s] Validation failed: %s", request_id, errors)
            raise SubmissionRejectedError(request_id, errors)

        if not self.client.initialized:
            logger.error("[%s] Talenox API credentials not configured, refusing submission", request_id)
            raise ServiceNotConfiguredError(request_id)

        previous = self.deduplicator.check_and_remember(submission, request_id)
        if previous is not None:
            logger.warning("[%s] Duplicate of %s, refusing submission", request_id, previous)
            raise DuplicateSubmissionError(request_id, previous)

        logger.info(
            "[%s] Accepted submission for background processing: %s",
            request_id,
            redact_submission(submission.model_dump()),
        )
        return request_id

    def submit(self, submission: Submission) -> str:
        """Accept a submission and continue the workflow in the background.

        Must be called from a running event loop.
        """
        request_id = self.accept(submission)
        task = asyncio.create_task(self.run(submission, request_id), name=f"onboarding-{request_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return request_id

    async def shutdown(self) -> None:
        if self._tasks:
            logger.info("Waiting for %d onboarding workflow(s) to finish", len(self._tasks))
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def run(self, submission: Submission, request_id: str) -> WorkflowOutcome:
        started = time.perf_counter()
        progress: dict[str, WorkflowOutcome] = {}
        try:
            outcome = await self._execute(submission, request_id, progress)
        except Exception as e:
            logger.exception("[%s] Background processing error", request_id)
            outcome = await self._unexpected_error(submission, request_id, progress.get("person"), e)

        logger.info(
            "[%s] Workflow finished state=%s success=%s in %.0fms",
            request_id,
            outcome.state,
            outcome.success,
            (time.perf_counter() - started) * 1000,
        )
        return outcome

    async def _unexpected_error(
        self,
        submission: Submission,
        request_id: str,
        person: WorkflowOutcome | None,
        error: Exception,
    ) -> WorkflowOutcome:
        message = f"Unexpected error: {error}"
        if person is None:
            self.deduplicator.forget(submission)
            await self.notifier.notify_failure(submission, "System Error", message)
            return self._outcome(submission, request_id, WorkflowState.FAILED, ErrorType.SYSTEM, message)

        # The Talenox employee exists: keep its id and keep blocking resubmission
        await self.notifier.notify_failure(
            submission,
            "System Error (employee created)",
            f"Talenox employee {person.employee_id} was created, then: {message}",
        )
        return person.model_copy(
            update={
                "state": WorkflowState.DONE,
                "job_created": False,
                "error_type": ErrorType.SYSTEM,
                "error_message": message,
            }
        )

    def _outcome(
        self,
        submission: Submission,
        request_id: str,
        state: WorkflowState,
        error_type: ErrorType,
        message: str,
    ) -> WorkflowOutcome:
        return WorkflowOutcome(
            success=False,
            request_id=request_id,
            category=submission.employee_type,
            state=state,
            error_type=error_type,
            error_message=message,
        )

    async def _fail(
        self,
        submission: Submission,
        request_id: str,
        error_type: ErrorType,
        message: str,
        notification_type: str,
        notification_details: str | None = None,
    ) -> WorkflowOutcome:
        logger.error("[%s] Onboarding failed (%s): %s", request_id, error_type, message)
        if error_type is not ErrorType.DUPLICATE:
            self.deduplicator.forget(submission)
        await self.notifier.notify_failure(submission, notification_type, notification_details or message)
        return self._outcome(submission, request_id, WorkflowState.FAILED, error_type, message)

    async def _execute(
        self,
        submission: Submission,
        request_id: str,
        progress: dict[str, WorkflowOutcome],
    ) -> WorkflowOutcome:
        logger.info("[%s] Processing submission in background", request_id)

        errors = validate_submission(submission)
        if errors:
            logger.info("[%s] Rejected: %s", request_id, errors)
            return self._outcome(
                submission, request_id, WorkflowState.REJECTED, ErrorType.VALIDATION, "; ".join(errors)
            )
        logger.debug("[%s] State -> %s", request_id, WorkflowState.VALIDATED)

        if not self.client.initialized:
            return await self._fail(
                submission,
                request_id,
                ErrorType.CONFIGURATION,
                "Talenox API is not properly configured",
                "Configuration Error",
            )

        today = self.today()
        internal_id = await self.allocator.allocate()
        record = build_person_record(submission, internal_id, today)
        logger.info("[%s] Creating employee via Talenox API: %s", request_id, redact_submission(record.model_dump()))

        try:
            created = await self.client.create_employee(record)
        except TalenoxNotConfiguredError as e:
            return await self._fail(submission, request_id, ErrorType.CONFIGURATION, str(e), "Configuration Error")
        except TalenoxAPIError as e:
            return await self._person_creation_failed(submission, request_id, e)

        person_id = created_person_id(created)
        if person_id is None:
            return await self._fail(
                submission,
                request_id,
                ErrorType.DOWNSTREAM,
                "Talenox response did not include an employee id",
                "Talenox API Error (unknown)",
            )
        logger.info("[%s] State -> %s (employee id %s)", request_id, WorkflowState.PERSON_CREATED, person_id)

        outcome = WorkflowOutcome(
            success=True,
            request_id=request_id,
            category=submission.employee_type,
            state=WorkflowState.PERSON_CREATED,
            employee_id=person_id,
            internal_employee_id=internal_id,
        )
        progress["person"] = outcome

        job_result, notified = await asyncio.gather(
            self._create_job(person_id, submission, record, today, request_id),
            self.notifier.notify_success(submission, outcome),
            return_exceptions=True,
        )
        if isinstance(notified, BaseException):
            logger.error("[%s] Success notification raised: %s", request_id, notified)

        if isinstance(job_result, BaseException):
            logger.error(
                "[%s] State -> %s, employee %s was created: %s",
                request_id,
                WorkflowState.JOB_FAILED,
                person_id,
                job_result,
            )
            await self.notifier.notify_failure(
                submission,
                "Job Creation Failed (employee created)",
                f"Talenox employee {person_id} was created but its job record was not: {job_result}",
            )
            outcome = outcome.model_copy(
                update={
                    "state": WorkflowState.DONE,
                    "job_created": False,
                    "error_type": ErrorType.PARTIAL,
                    "error_message": f"Employee created but job creation failed: {job_result}",
                }
            )
        else:
            job_id = job_result.get("id") if isinstance(job_result, dict) else None
            logger.info("[%s] State -> %s (job id %s)", request_id, WorkflowState.JOB_CREATED, job_id)
            outcome = outcome.model_copy(
                update={
                    "state": WorkflowState.DONE,
                    "job_created": True,
                    "job_id": str(job_id) if job_id is not None else None,
                }
            )

        logger.debug("[%s] State -> %s -> %s", request_id, WorkflowState.NOTIFIED, WorkflowState.DONE)
        return outcome

    async def _create_job(
        self,
        person_id: str,
        submission: Submission,
        record: PersonRecord,
        today: date,
        request_id: str,
    ) -> Any:
        job = build_job_record(person_id, submission, record.hired_date, record.resign_date, today)
        logger.info("[%s] Creating job for employee %s: %s", request_id, person_id, job.model_dump())
        return await self.client.create_job(job)

    async def _person_creation_failed(
        self,
        submission: Submission,
        request_id: str,
        error: TalenoxAPIError,
    ) -> WorkflowOutcome:
        if error.is_duplicate:
            error_type = ErrorType.DUPLICATE
            message = (
                "This employee may already be registered. If you've already submitted this form, "
                f"please contact HR at {self.hr_contact_email} instead of resubmitting."
            )
            label = "duplicate"
        else:
            error_type = ErrorType.DOWNSTREAM
            message = error.message
            label = "unknown"

        details = f"{message} (Status: {error.status})\nRaw Response: {error.body[:RAW_RESPONSE_EXCERPT]}"
        return await self._fail(
            submission,
            request_id,
            error_type,
            message,
            f"Talenox API Error ({label})",
            details,
        )


onboarding_workflow = OnboardingWorkflow()
