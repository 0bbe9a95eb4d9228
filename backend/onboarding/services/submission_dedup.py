"""Short-lived suppression of repeated form submissions.

Keys are a hash of the identity fields, so resubmitting the same person
within the TTL is refused even if cosmetic fields changed. Entries live in
process memory only and expire lazily on the next lookup.
"""

from __future__ import annotations

import hashlib
import time
from typing import Callable

from onboarding.core.config import Settings
from onboarding.models.submission import Submission


def submission_fingerprint(submission: Submission) -> str:
    parts = [
        (submission.employee_type or "").lower(),
        (submission.nric or "").upper(),
        (submission.email or "").lower(),
        submission.account_number or "",
    ]
    return hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()


class SubmissionDeduplicator:
    def __init__(self, ttl_seconds: int = 300, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._seen: dict[str, tuple[float, str]] = {}

    def configure(self, settings: Settings) -> None:
        self.ttl_seconds = settings.DEDUP_TTL_SECONDS

    def _purge(self, now: float) -> None:
        expired = [key for key, (ts, _) in self._seen.items() if now - ts >= self.ttl_seconds]
        for key in expired:
            del self._seen[key]

    def check_and_remember(self, submission: Submission, request_id: str) -> str | None:
        """Record the submission; return the earlier request id if it is a repeat."""
        if self.ttl_seconds <= 0:
            return None

        now = self._clock()
        self._purge(now)

        key = submission_fingerprint(submission)
        previous = self._seen.get(key)
        if previous is not None:
            return previous[1]

        self._seen[key] = (now, request_id)
        return None

    def forget(self, submission: Submission) -> None:
        self._seen.pop(submission_fingerprint(submission), None)

    def clear(self) -> None:
        self._seen.clear()


submission_deduplicator = SubmissionDeduplicator()
