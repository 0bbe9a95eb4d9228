"""Onboarding form submission as posted by the intake form."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EmploymentCategory(StrEnum):
    TRAINER = "trainer"
    INTERN_SCHOOL = "intern_school"
    INTERN_NO_SCHOOL = "intern_no_school"
    FULLTIME = "fulltime"

    @property
    def is_intern(self) -> bool:
        return self in (EmploymentCategory.INTERN_SCHOOL, EmploymentCategory.INTERN_NO_SCHOOL)

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS: dict[EmploymentCategory, str] = {
    EmploymentCategory.TRAINER: "Freelance Trainer",
    EmploymentCategory.INTERN_SCHOOL: "Intern with School Letter",
    EmploymentCategory.INTERN_NO_SCHOOL: "Intern without School Letter",
    EmploymentCategory.FULLTIME: "Full-time Employee",
}


class Submission(BaseModel):
    """Raw intake form data.

    Every field is optional here: completeness is reported by the validator,
    not by the parser, so that all problems can be listed at once.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    employee_type: str | None = Field(default=None, alias="employeeType")
    full_name: str | None = Field(default=None, alias="fullName")
    email: str | None = None
    nric: str | None = None
    nationality: str | None = None
    citizenship_status: str | None = Field(default=None, alias="citizenshipStatus")
    dob: str | None = None
    gender: str | None = None
    bank: str | None = None
    account_name: str | None = Field(default=None, alias="accountName")
    account_number: str | None = Field(default=None, alias="accountNumber")
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    job_title: str | None = Field(default=None, alias="jobTitle")
    requires_shg: bool = Field(default=False, alias="requiresSHG")

    @field_validator("requires_shg", mode="before")
    @classmethod
    def _null_shg_means_no(cls, value: object) -> object:
        # Forms post null when the checkbox was never shown
        return False if value is None or value == "" else value

    @property
    def category(self) -> EmploymentCategory | None:
        try:
            return EmploymentCategory(self.employee_type)
        except ValueError:
            return None

    @property
    def category_label(self) -> str:
        category = self.category
        if category is not None:
            return category.label
        return self.employee_type or "Unknown"
