"""HR notification emails sent through the Resend API.

The notifier observes workflow outcomes. Its public ``notify_*`` methods
return whether an email went out and never raise, so a mail outage cannot
change the result of an onboarding run.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import aiohttp

from onboarding.core.config import Settings
from onboarding.models.onboarding import WorkflowOutcome
from onboarding.models.submission import Submission

logger = logging.getLogger(__name__)

SEND_TIMEOUT_SECONDS = 15

SUCCESS_TEMPLATE = """\
New Employee Onboarding Submission

Employee Details:
- Name: {name}
- Employee Type: {employee_type}
- Email: {email}
- Nationality: {nationality}
- Citizenship Status: {citizenship_status}

Talenox Integration:
- Internal Employee ID: {internal_employee_id}
- Talenox Database ID: {employee_id}
- Job ID: {job_id}
- Status: Successfully created with automatic user account invitation

Next Steps:
- Employee will receive Talenox account invitation email
- Review employee details in Talenox dashboard
- Confirm all information is correct

This is an automated notification from the Tinkercademy onboarding system."""

FAILURE_TEMPLATE = """\
FAILED Employee Onboarding Submission

Employee Details:
- Name: {name}
- Employee Type: {employee_type}
- Email: {email}
- Nationality: {nationality}
- Citizenship Status: {citizenship_status}

Failure Details:
- Error Type: {error_type}
- Error Message: {error_message}
- Timestamp: {timestamp}

Action Required:
- Review the error details above
- Check if this requires manual intervention
- Contact the employee if needed to resubmit

This is an automated failure alert from the Tinkercademy onboarding system."""


class NotificationError(Exception):
    pass


def compose_success_email(submission: Submission, outcome: WorkflowOutcome) -> tuple[str, str]:
    subject = f"New Employee: {submission.full_name} ({submission.category_label})"
    body = SUCCESS_TEMPLATE.format(
        name=submission.full_name,
        employee_type=submission.category_label,
        email=submission.email,
        nationality=submission.nationality or "Not specified",
        citizenship_status=submission.citizenship_status or "Not specified",
        internal_employee_id=outcome.internal_employee_id or "Unknown",
        employee_id=outcome.employee_id or "Unknown",
        job_id=outcome.job_id or "Pending",
    )
    return subject, body


def compose_failure_email(
    submission: Submission,
    error_type: str,
    error_message: str,
    now: datetime | None = None,
) -> tuple[str, str]:
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    label = submission.category_label if submission.employee_type else "Unknown"
    subject = f"FAILED Onboarding: {submission.full_name or 'Unknown'} ({label})"
    body = FAILURE_TEMPLATE.format(
        name=submission.full_name or "Not provided",
        employee_type=label,
        email=submission.email or "Not provided",
        nationality=submission.nationality or "Not provided",
        citizenship_status=submission.citizenship_status or "Not provided",
        error_type=error_type,
        error_message=error_message,
        timestamp=timestamp,
    )
    return subject, body


class Notifier:
    def __init__(self) -> None:
        self.initialized = False
        self.api_url = ""
        self.api_key = ""
        self.recipient = ""
        self.sender = ""

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.RESEND_API_KEY or not settings.NOTIFY_EMAIL:
            logger.warning("Resend credentials missing — notifications disabled")
            return

        self.api_url = settings.RESEND_API_URL.rstrip("/")
        self.api_key = settings.RESEND_API_KEY
        self.recipient = settings.NOTIFY_EMAIL
        self.sender = settings.FROM_EMAIL
        self.initialized = True

    async def close(self) -> None:
        self.initialized = False
        self.api_key = ""

    async def send_email(self, subject: str, body: str) -> str | None:
        if not self.initialized:
            raise NotificationError("Notifier not initialized")

        payload = {
            "from": self.sender,
            "to": [self.recipient],
            "subject": subject,
            "text": body,
        }
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}

        timeout = aiohttp.ClientTimeout(total=SEND_TIMEOUT_SECONDS)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(f"{self.api_url}/emails", headers=headers, json=payload) as response:
                if response.status in (200, 201, 202):
                    data = await response.json(content_type=None)
                    return data.get("id") if isinstance(data, dict) else None

                error_text = await response.text()
                raise NotificationError(f"Email send failed: {response.status} - {error_text}")

    async def _deliver(self, kind: str, subject: str, body: str) -> bool:
        if not self.initialized:
            logger.info("Resend not configured, skipping %s notification", kind)
            return False
        try:
            message_id = await self.send_email(subject, body)
        except Exception:
            logger.exception("Failed to send %s notification", kind)
            return False
        logger.info("%s notification sent (id=%s)", kind.capitalize(), message_id)
        return True

    async def notify_success(self, submission: Submission, outcome: WorkflowOutcome) -> bool:
        subject, body = compose_success_email(submission, outcome)
        return await self._deliver("success", subject, body)

    async def notify_failure(self, submission: Submission, error_type: str, error_message: str) -> bool:
        subject, body = compose_failure_email(submission, error_type, error_message)
        return await self._deliver("failure", subject, body)


notifier = Notifier()
