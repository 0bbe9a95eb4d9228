"""Next human-facing employee number, derived from recent Talenox records.

Allocation reads the newest employees and adds one to the highest number it
finds. There is no reservation step: two submissions processed at the same
time can be given the same number.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from onboarding.core.config import Settings
from onboarding.services.talenox_client import TalenoxClient, talenox_client

logger = logging.getLogger(__name__)

RECENT_PAGE_SIZE = 50
DEFAULT_CEILING = 10000
DEFAULT_FALLBACK = "301"

_NON_DIGITS = re.compile(r"\D")


class EmployeeNumberAdapter:
    """Reads the employee number out of a raw Talenox employee record.

    Talenox does not document which key carries the number, so the known
    spellings are tried in order. The database primary key ``id`` is never
    taken as an employee number.
    """

    CANDIDATE_FIELDS: tuple[str, ...] = (
        "employee_id",
        "emp_id",
        "employee_no",
        "employee_number",
        "staff_id",
        "emp_no",
        "employeeId",
        "empId",
    )

    def employee_number(self, record: dict[str, Any]) -> str | None:
        primary_key = record.get("id")
        for field in self.CANDIDATE_FIELDS:
            value = record.get(field)
            if value in (None, "", 0):
                continue
            if value == primary_key:
                continue
            return str(value)
        return None

    @staticmethod
    def numeric_part(value: str) -> int | None:
        digits = _NON_DIGITS.sub("", value)
        if not digits:
            return None
        return int(digits)


def next_employee_id(
    records: Iterable[dict[str, Any]],
    ceiling: int = DEFAULT_CEILING,
    fallback: str = DEFAULT_FALLBACK,
    adapter: EmployeeNumberAdapter | None = None,
) -> str:
    adapter = adapter or EmployeeNumberAdapter()
    highest: int | None = None

    for record in records:
        raw = adapter.employee_number(record)
        if raw is None:
            continue
        number = adapter.numeric_part(raw)
        # Large values are internal keys, not employee numbers
        if number is None or number >= ceiling:
            continue
        if highest is None or number > highest:
            highest = number

    if not highest:
        return fallback
    return str(highest + 1)


class EmployeeIdAllocator:
    def __init__(self, client: TalenoxClient | None = None) -> None:
        self.client = client or talenox_client
        self.adapter = EmployeeNumberAdapter()
        self.ceiling = DEFAULT_CEILING
        self.fallback = DEFAULT_FALLBACK

    def configure(self, settings: Settings) -> None:
        self.ceiling = settings.EMPLOYEE_ID_CEILING
        self.fallback = settings.EMPLOYEE_ID_FALLBACK

    async def allocate(self) -> str:
        try:
            records = await self.client.list_employees(per=RECENT_PAGE_SIZE, sort="-created_at")
        except Exception as e:
            logger.warning("Could not fetch existing employees, using fallback %s: %s", self.fallback, e)
            return self.fallback

        next_id = next_employee_id(records, self.ceiling, self.fallback, self.adapter)
        logger.info("Scanned %d employees, next employee ID: %s", len(records), next_id)
        return next_id


employee_id_allocator = EmployeeIdAllocator()
