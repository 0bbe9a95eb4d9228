"""Mapping from a validated submission to Talenox person and job records.

Output depends only on the submission, the allocated employee number and
``today``, which callers pass in explicitly.
"""

from __future__ import annotations

from datetime import date, timedelta

from onboarding.models.submission import EmploymentCategory, Submission
from onboarding.models.talenox import BankAccountAttributes, JobAttributes, JobRecord, PersonRecord
from onboarding.services.validator import parse_iso_date

DEFAULT_NATIONALITY = "Singaporean"

CITIZENSHIP_CONTRACT = "Contract (No CPF, No SDL)"
CITIZENSHIP_INTERN = "Intern"
CITIZENSHIP_CITIZEN = "Singapore Citizen"
CITIZENSHIP_PR = "Singapore PR"

INTERN_JOB_MONTHS = 3
FULLTIME_JOB_YEARS = 10

# category -> (job title, department, monthly amount)
_JOB_PROFILES: dict[EmploymentCategory, tuple[str, str, int]] = {
    EmploymentCategory.TRAINER: ("Freelance Trainer", "Tinkercademy", 0),
    EmploymentCategory.INTERN_SCHOOL: ("Tinkertanker Intern", "Internship", 800),
    EmploymentCategory.INTERN_NO_SCHOOL: ("Tinkertanker Intern", "Internship", 800),
    EmploymentCategory.FULLTIME: ("Tinkertanker Full-timer", "Operations", 3000),
}


class TransformationError(Exception):
    pass


def first_of_previous_month(today: date) -> date:
    return (today.replace(day=1) - timedelta(days=1)).replace(day=1)


def first_of_next_month(today: date) -> date:
    if today.month == 12:
        return date(today.year + 1, 1, 1)
    return date(today.year, today.month + 1, 1)


def add_months(day_one: date, months: int) -> date:
    """Shift a first-of-month date by whole months."""
    index = day_one.month - 1 + months
    return day_one.replace(year=day_one.year + index // 12, month=index % 12 + 1, day=1)


def format_job_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def citizenship_for(category: EmploymentCategory, citizenship_status: str | None) -> str:
    if category is EmploymentCategory.INTERN_NO_SCHOOL:
        return CITIZENSHIP_INTERN
    if category is EmploymentCategory.FULLTIME:
        if citizenship_status == "sg_pr":
            return CITIZENSHIP_PR
        return CITIZENSHIP_CITIZEN
    return CITIZENSHIP_CONTRACT


def capitalize_gender(gender: str) -> str:
    return gender[:1].upper() + gender[1:]


def employment_dates(submission: Submission, today: date) -> tuple[str, str | None]:
    """Return the ``(hired_date, resign_date)`` pair as ISO strings."""
    hired_date = submission.start_date
    resign_date = submission.end_date or None

    if submission.category is EmploymentCategory.TRAINER:
        hired = parse_iso_date(hired_date) or first_of_previous_month(today)
        # Trainers are always booked as a one-day engagement
        return hired.isoformat(), (hired + timedelta(days=1)).isoformat()

    if not hired_date:
        raise TransformationError(f"Missing start date for {submission.employee_type}")
    return hired_date, resign_date


def build_person_record(submission: Submission, employee_id: str, today: date) -> PersonRecord:
    category = submission.category
    if category is None:
        raise TransformationError(f"Unknown employee type: {submission.employee_type!r}")

    hired_date, resign_date = employment_dates(submission, today)

    return PersonRecord(
        first_name=submission.full_name or "",
        identification_full_name=submission.full_name or "",
        email=submission.email or "",
        gender=capitalize_gender(submission.gender or ""),
        nationality=submission.nationality or DEFAULT_NATIONALITY,
        hired_date=hired_date,
        resign_date=resign_date,
        birthdate=submission.dob or "",
        ssn=submission.nric or "",
        employee_id=employee_id,
        citizenship=citizenship_for(category, submission.citizenship_status),
        bank_account_attributes=BankAccountAttributes(
            bank_type=submission.bank or "",
            account_name=submission.account_name or "",
            number=submission.account_number or "",
        ),
        job_title=submission.job_title,
        position=submission.job_title,
        employee_type=category.value,
        requires_shg=submission.requires_shg,
    )


def job_period(
    category: EmploymentCategory,
    hired_date: str,
    resign_date: str | None,
    today: date,
) -> tuple[date, date]:
    if category is EmploymentCategory.TRAINER:
        start = date.fromisoformat(hired_date)
        end = date.fromisoformat(resign_date) if resign_date else start + timedelta(days=1)
        return start, end

    start = first_of_next_month(today)
    if category.is_intern:
        return start, add_months(start, INTERN_JOB_MONTHS)
    return start, start.replace(year=start.year + FULLTIME_JOB_YEARS)


def build_job_record(
    person_id: str | int,
    submission: Submission,
    hired_date: str,
    resign_date: str | None,
    today: date,
) -> JobRecord:
    category = submission.category
    if category is None:
        raise TransformationError(f"Unknown employee type: {submission.employee_type!r}")

    try:
        employee_id = int(person_id)
    except (TypeError, ValueError) as e:
        raise TransformationError(f"Talenox person id is not numeric: {person_id!r}") from e

    title, department, amount = _JOB_PROFILES[category]
    start, end = job_period(category, hired_date, resign_date, today)

    return JobRecord(
        employee_id=employee_id,
        title=title,
        job=JobAttributes(
            title=title,
            department=department,
            start_date=format_job_date(start),
            end_date=format_job_date(end),
            amount=amount,
            remarks=f"Auto-created job for {category.value}",
        ),
    )
