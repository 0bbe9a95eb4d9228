"""Payloads sent to the Talenox HR system."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BankAccountAttributes(BaseModel):
    model_config = ConfigDict(frozen=True)

    bank_type: str
    account_name: str
    number: str


class PersonRecord(BaseModel):
    """Employee record in the shape accepted by ``POST /employees``."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    identification_full_name: str
    email: str
    gender: str
    nationality: str
    hired_date: str
    resign_date: str | None = None
    birthdate: str
    ssn: str
    employee_id: str
    citizenship: str
    bank_account_attributes: BankAccountAttributes
    job_title: str | None = None
    position: str | None = None
    invite_user: bool = True
    employee_type: str
    requires_shg: bool = False
    country_id: str = "SG"


class JobAttributes(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    department: str
    start_date: str
    end_date: str
    currency: str = "SGD"
    amount: int
    rate_of_pay: str = "Monthly"
    remarks: str


class JobRecord(BaseModel):
    """Job record in the shape accepted by ``POST /jobs``."""

    model_config = ConfigDict(frozen=True)

    employee_id: int
    title: str
    job: JobAttributes
