#!/usr/bin/env python3
"""Send a sample onboarding submission to a running intake service.

Run from the backend/ directory:

    python3 scripts/submit_sample.py [trainer|intern|fulltime] [--url URL] [--validate-only]

With --validate-only nothing is sent: the sample is validated and
transformed locally and the (redacted) Talenox payloads are printed.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from datetime import date
from typing import Any

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import aiohttp  # noqa: E402

from onboarding.core.redaction import redact_submission  # noqa: E402
from onboarding.models.submission import Submission  # noqa: E402
from onboarding.services.employee_id_allocator import DEFAULT_FALLBACK  # noqa: E402
from onboarding.services.transformer import build_job_record, build_person_record  # noqa: E402
from onboarding.services.validator import validate_submission  # noqa: E402

logger = logging.getLogger(__name__)

SUBMIT_PATH = "/api/v1/onboarding/submissions"

SAMPLES: dict[str, dict[str, Any]] = {
    "trainer": {
        "employeeType": "trainer",
        "fullName": "Test Trainer",
        "email": "test.trainer@example.com",
        "nric": "S1234567A",
        "nationality": "Singaporean",
        "citizenshipStatus": "sg_citizen",
        "dob": "1990-01-15",
        "gender": "male",
        "bank": "DBS",
        "accountName": "Test Trainer",
        "accountNumber": "1234567890",
    },
    "intern": {
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
    },
    "fulltime": {
        "employeeType": "fulltime",
        "fullName": "Test Fulltime",
        "email": "test.fulltime@example.com",
        "nric": "G1122334C",
        "nationality": "Malaysian",
        "citizenshipStatus": "other",
        "dob": "1985-03-10",
        "gender": "male",
        "startDate": "2025-02-15",
        "bank": "UOB",
        "accountName": "Test Fulltime",
        "accountNumber": "5555666677",
    },
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send a sample onboarding submission")
    parser.add_argument("sample", nargs="?", default="trainer", choices=sorted(SAMPLES))
    parser.add_argument(
        "--url",
        default=os.environ.get("API_URL", "http://localhost:8000"),
        help="Base URL of the intake service (default: $API_URL or http://localhost:8000)",
    )
    parser.add_argument("--validate-only", action="store_true", help="Validate and transform locally")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def preview(payload: dict[str, Any], today: date | None = None) -> dict[str, Any]:
    """Validate and transform a payload without touching the network."""
    submission = Submission.model_validate(payload)
    errors = validate_submission(submission)
    if errors:
        return {"valid": False, "errors": errors}

    today = today or date.today()
    person = build_person_record(submission, DEFAULT_FALLBACK, today)
    job = build_job_record(0, submission, person.hired_date, person.resign_date, today)
    return {
        "valid": True,
        "person": redact_submission(person.model_dump()),
        "job": job.model_dump(),
    }


async def post_submission(
    session: aiohttp.ClientSession,
    base_url: str,
    payload: dict[str, Any],
) -> tuple[int, Any]:
    url = f"{base_url.rstrip('/')}{SUBMIT_PATH}"
    async with session.post(url, json=payload) as response:
        body = await response.json(content_type=None)
        return response.status, body


async def run(args: argparse.Namespace) -> int:
    payload = SAMPLES[args.sample]
    logger.info("Sample %s: %s", args.sample, redact_submission(payload))

    if args.validate_only:
        result = preview(payload)
        print(json.dumps(result, indent=2))
        return 0 if result["valid"] else 1

    timeout = aiohttp.ClientTimeout(total=30)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        status, body = await post_submission(session, args.url, payload)

    print(json.dumps({"status": status, "body": body}, indent=2))
    return 0 if status == 202 else 1


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
