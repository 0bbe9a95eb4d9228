"""Intake form validation.

Every rule is checked and every failure is reported, so the applicant can
fix the whole form in one round trip. An empty result is the only gate for
moving on to the Talenox transformation.
"""

from __future__ import annotations

import re
from datetime import date

from onboarding.models.submission import EmploymentCategory, Submission

NRIC_PATTERN = re.compile(r"^[STFGM]\d{7}[A-Z]$", re.IGNORECASE | re.ASCII)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
ACCOUNT_NUMBER_PATTERN = re.compile(r"^\d+$", re.ASCII)
NRIC_LENGTH = 9

# (attribute, label) in the order errors are reported
REQUIRED_FIELDS: list[tuple[str, str]] = [
    ("employee_type", "Employee type"),
    ("full_name", "Full name"),
    ("email", "Email"),
    ("nric", "NRIC/FIN"),
    ("nationality", "Nationality"),
    ("citizenship_status", "Citizenship status"),
    ("dob", "Date of birth"),
    ("gender", "Gender"),
    ("bank", "Bank"),
    ("account_name", "Account name"),
    ("account_number", "Account number"),
]


def parse_iso_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def validate_nric(nric: str) -> str | None:
    value = nric.strip()
    if len(value) != NRIC_LENGTH:
        if len(value) == 4 and value.isdigit():
            return "Please enter your complete 9-character NRIC/FIN, not just the last 4 digits"
        return "NRIC/FIN must be exactly 9 characters (e.g., S1234567A)"
    if not NRIC_PATTERN.match(value):
        return "Invalid NRIC/FIN format. It should start with S, T, F, G, or M followed by 7 digits and 1 letter"
    return None


def _validate_dates(submission: Submission, category: EmploymentCategory) -> list[str]:
    errors: list[str] = []
    start = parse_iso_date(submission.start_date)
    end = parse_iso_date(submission.end_date)

    if submission.start_date and start is None:
        errors.append("Start date must be a valid date (YYYY-MM-DD)")
    if submission.end_date and end is None:
        errors.append("End date must be a valid date (YYYY-MM-DD)")

    if category.is_intern:
        if not submission.start_date:
            errors.append("Start date is required for interns")
        if not submission.end_date:
            errors.append("End date is required for interns")
        if start and end and end <= start:
            errors.append("End date must be after start date")
    elif category is EmploymentCategory.FULLTIME:
        if not submission.start_date:
            errors.append("Start date is required for full-time employees")

    return errors


def validate_submission(submission: Submission) -> list[str]:
    errors: list[str] = []

    for attr, label in REQUIRED_FIELDS:
        if not getattr(submission, attr):
            errors.append(f"{label} is required")

    category = submission.category
    if submission.employee_type and category is None:
        allowed = ", ".join(c.value for c in EmploymentCategory)
        errors.append(f"Employee type must be one of: {allowed}")

    if submission.nric:
        nric_error = validate_nric(submission.nric)
        if nric_error:
            errors.append(nric_error)

    if submission.email and not EMAIL_PATTERN.match(submission.email):
        errors.append("Invalid email format")

    if category is not None:
        errors.extend(_validate_dates(submission, category))

    if submission.account_number and not ACCOUNT_NUMBER_PATTERN.match(submission.account_number):
        errors.append("Account number must contain only digits")

    return errors
