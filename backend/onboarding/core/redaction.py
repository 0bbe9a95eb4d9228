"""Masking of personal data before it reaches the logs."""

from __future__ import annotations

from typing import Any

_MASK = "****"


def mask_nric(value: str | None) -> str | None:
    if not value:
        return value
    return f"{value[:1]}{_MASK}{value[-1:]}"


def mask_account_number(value: str | None) -> str | None:
    if not value:
        return value
    return f"{_MASK}{value[-4:]}"


def redact_submission(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a submission or person payload safe for logging.

    Handles both the intake form keys and the Talenox payload keys.
    """
    redacted = dict(data)
    for key in ("nric", "ssn"):
        if redacted.get(key):
            redacted[key] = mask_nric(str(redacted[key]))
    for key in ("account_number", "accountNumber"):
        if redacted.get(key):
            redacted[key] = mask_account_number(str(redacted[key]))

    bank = redacted.get("bank_account_attributes")
    if isinstance(bank, dict) and bank.get("number"):
        redacted["bank_account_attributes"] = {**bank, "number": mask_account_number(str(bank["number"]))}

    return redacted
