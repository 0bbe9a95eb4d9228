from __future__ import annotations

from datetime import date

import pytest

from onboarding.models.submission import EmploymentCategory, Submission
from onboarding.services.transformer import (
    CITIZENSHIP_CITIZEN,
    CITIZENSHIP_CONTRACT,
    CITIZENSHIP_INTERN,
    CITIZENSHIP_PR,
    TransformationError,
    add_months,
    build_job_record,
    build_person_record,
    citizenship_for,
    first_of_next_month,
    first_of_previous_month,
)

TODAY = date(2025, 3, 18)


def _submission(payload: dict, **overrides) -> Submission:
    data = {**payload, **overrides}
    return Submission.model_validate({k: v for k, v in data.items() if v is not None})


def _trainer(payload: dict, **overrides) -> Submission:
    base = {k: v for k, v in payload.items() if k not in ("startDate", "endDate")}
    base["employeeType"] = "trainer"
    return _submission(base, **overrides)


def test_intern_with_school_example(valid_payload):
    submission = _submission(valid_payload)

    person = build_person_record(submission, "302", TODAY)
    job = build_job_record("12345", submission, person.hired_date, person.resign_date, TODAY)

    assert person.citizenship == CITIZENSHIP_CONTRACT
    assert person.hired_date == "2025-02-01"
    assert person.resign_date == "2025-05-31"
    assert job.job.amount == 800


def test_person_record_field_mapping(valid_payload):
    person = build_person_record(_submission(valid_payload, jobTitle="Robotics Intern"), "302", TODAY)

    assert person.first_name == "Test Intern"
    assert person.identification_full_name == "Test Intern"
    assert person.email == "test.intern@example.com"
    assert person.gender == "Female"
    assert person.birthdate == "2000-06-20"
    assert person.ssn == "T9876543B"
    assert person.employee_id == "302"
    assert person.bank_account_attributes.bank_type == "OCBC"
    assert person.bank_account_attributes.account_name == "Test Intern"
    assert person.bank_account_attributes.number == "9876543210"
    assert person.job_title == "Robotics Intern"
    assert person.position == "Robotics Intern"
    assert person.invite_user is True
    assert person.employee_type == "intern_school"
    assert person.requires_shg is False
    assert person.country_id == "SG"


def test_loose_form_values_map_to_person(valid_payload):
    submission = Submission.model_validate({**valid_payload, "accountNumber": 9876543210, "requiresSHG": None})

    person = build_person_record(submission, "302", TODAY)

    assert submission.account_number == "9876543210"
    assert person.bank_account_attributes.number == "9876543210"
    assert person.requires_shg is False
    assert build_person_record(_submission(valid_payload, requiresSHG=True), "302", TODAY).requires_shg is True


def test_is_deterministic(valid_payload):
    submission = _submission(valid_payload)

    assert build_person_record(submission, "302", TODAY) == build_person_record(submission, "302", TODAY)


def test_nationality_defaults_to_singaporean(valid_payload):
    person = build_person_record(_submission(valid_payload, nationality=""), "302", TODAY)

    assert person.nationality == "Singaporean"


class TestTrainer:
    def test_defaults_hire_date_to_first_of_previous_month(self, valid_payload):
        person = build_person_record(_trainer(valid_payload), "302", TODAY)

        assert person.hired_date == "2025-02-01"
        assert person.resign_date == "2025-02-02"

    def test_previous_month_across_year_boundary(self, valid_payload):
        person = build_person_record(_trainer(valid_payload), "302", date(2025, 1, 9))

        assert person.hired_date == "2024-12-01"
        assert person.resign_date == "2024-12-02"

    def test_end_date_always_day_after_hire(self, valid_payload):
        submission = _trainer(valid_payload, startDate="2025-02-28", endDate="2025-12-31")

        person = build_person_record(submission, "302", TODAY)

        assert person.hired_date == "2025-02-28"
        assert person.resign_date == "2025-03-01"

    def test_job_uses_hire_and_resign_dates(self, valid_payload):
        submission = _trainer(valid_payload)
        person = build_person_record(submission, "302", TODAY)

        job = build_job_record(7, submission, person.hired_date, person.resign_date, TODAY)

        assert job.title == "Freelance Trainer"
        assert job.job.department == "Tinkercademy"
        assert job.job.start_date == "01/02/2025"
        assert job.job.end_date == "02/02/2025"
        assert job.job.amount == 0
        assert person.citizenship == CITIZENSHIP_CONTRACT


class TestCitizenship:
    def test_intern_without_school(self):
        assert citizenship_for(EmploymentCategory.INTERN_NO_SCHOOL, "sg_citizen") == CITIZENSHIP_INTERN

    @pytest.mark.parametrize(
        ("status", "expected"),
        [("sg_citizen", CITIZENSHIP_CITIZEN), ("sg_pr", CITIZENSHIP_PR), ("other", CITIZENSHIP_CITIZEN), (None, CITIZENSHIP_CITIZEN)],
    )
    def test_fulltime_by_status(self, status, expected):
        assert citizenship_for(EmploymentCategory.FULLTIME, status) == expected

    @pytest.mark.parametrize("category", [EmploymentCategory.TRAINER, EmploymentCategory.INTERN_SCHOOL])
    def test_contract_categories(self, category):
        assert citizenship_for(category, "sg_pr") == CITIZENSHIP_CONTRACT


class TestJobRecord:
    def test_intern_job_starts_next_month_for_three_months(self, valid_payload):
        submission = _submission(valid_payload, employeeType="intern_no_school")

        job = build_job_record("55", submission, "2025-02-01", "2025-05-31", TODAY)

        assert job.employee_id == 55
        assert job.title == "Tinkertanker Intern"
        assert job.job.department == "Internship"
        assert job.job.start_date == "01/04/2025"
        assert job.job.end_date == "01/07/2025"
        assert job.job.amount == 800
        assert job.job.currency == "SGD"
        assert job.job.rate_of_pay == "Monthly"
        assert job.job.remarks == "Auto-created job for intern_no_school"

    def test_fulltime_job_runs_ten_years(self, valid_payload):
        submission = _submission(valid_payload, employeeType="fulltime", endDate="")

        person = build_person_record(submission, "302", TODAY)
        job = build_job_record("55", submission, person.hired_date, person.resign_date, TODAY)

        assert person.resign_date is None
        assert job.title == "Tinkertanker Full-timer"
        assert job.job.department == "Operations"
        assert job.job.start_date == "01/04/2025"
        assert job.job.end_date == "01/04/2035"
        assert job.job.amount == 3000

    def test_non_numeric_person_id(self, valid_payload):
        with pytest.raises(TransformationError):
            build_job_record("abc", _submission(valid_payload), "2025-02-01", "2025-05-31", TODAY)


def test_unknown_category_is_rejected(valid_payload):
    with pytest.raises(TransformationError):
        build_person_record(_submission(valid_payload, employeeType="contractor"), "302", TODAY)


@pytest.mark.parametrize(
    ("today", "expected"),
    [(date(2025, 3, 18), date(2025, 2, 1)), (date(2025, 1, 1), date(2024, 12, 1))],
)
def test_first_of_previous_month(today, expected):
    assert first_of_previous_month(today) == expected


def test_first_of_next_month_wraps_year():
    assert first_of_next_month(date(2025, 12, 31)) == date(2026, 1, 1)


def test_add_months_wraps_year():
    assert add_months(date(2025, 11, 1), 3) == date(2026, 2, 1)
