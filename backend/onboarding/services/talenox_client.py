from __future__ import annotations

import json
import logging
from typing import Any

import aiohttp

from onboarding.core.config import Settings
from onboarding.models.talenox import JobRecord, PersonRecord

logger = logging.getLogger(__name__)

DUPLICATE_MARKERS = ("duplicate", "already exist", "has already been taken", "unique")
DEFAULT_ERROR_MESSAGE = "Failed to create employee in Talenox"


class TalenoxNotConfiguredError(Exception):
    pass


class TalenoxAPIError(Exception):
    """Non-2xx response from the Talenox API."""

    def __init__(self, status: int, body: str, default_message: str = DEFAULT_ERROR_MESSAGE) -> None:
        self.status = status
        self.body = body
        self.data = _parse_json(body)
        self.message = self._extract_message(default_message)
        super().__init__(f"{self.message} (Status: {status})")

    def _extract_message(self, default_message: str) -> str:
        if not isinstance(self.data, dict):
            return default_message
        for key in ("message", "error"):
            value = self.data.get(key)
            if isinstance(value, str) and value:
                return value
        errors = self.data.get("errors")
        if isinstance(errors, list) and errors:
            return "; ".join(str(e) for e in errors)
        if isinstance(errors, dict) and errors:
            return "; ".join(f"{key}: {value}" for key, value in errors.items())
        return default_message

    @property
    def is_duplicate(self) -> bool:
        # Heuristic: Talenox has no documented error code for duplicates
        text = (json.dumps(self.data) if self.data is not None else self.body).lower()
        return any(marker in text for marker in DUPLICATE_MARKERS)


def _parse_json(body: str) -> Any:
    try:
        return json.loads(body)
    except (TypeError, ValueError):
        return None


class TalenoxClient:
    def __init__(self) -> None:
        self.initialized = False
        self.base_url = ""
        self.api_key = ""
        self.timeout_seconds = 30

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.TALENOX_API_URL or not settings.TALENOX_API_KEY:
            logger.error("Talenox API credentials missing — TalenoxClient not initialized")
            return

        self.base_url = settings.TALENOX_API_URL.rstrip("/")
        self.api_key = settings.TALENOX_API_KEY
        self.timeout_seconds = settings.TALENOX_TIMEOUT_SECONDS
        self.initialized = True
        logger.info("TalenoxClient initialized (base_url=%s)", self.base_url)

    async def close(self) -> None:
        self.initialized = False
        self.base_url = ""
        self.api_key = ""

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
        error_message: str = DEFAULT_ERROR_MESSAGE,
    ) -> Any:
        if not self.initialized:
            raise TalenoxNotConfiguredError("Talenox API is not properly configured")

        url = f"{self.base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.request(
                method, url, headers=self._headers(), params=params, json=payload
            ) as response:
                if 200 <= response.status < 300:
                    return await response.json(content_type=None)

                error_text = await response.text()
                logger.error("Talenox %s %s failed: %s %s", method, path, response.status, error_text[:500])
                raise TalenoxAPIError(response.status, error_text, error_message)

    async def list_employees(self, per: int = 50, sort: str = "-created_at") -> list[dict[str, Any]]:
        data = await self._request(
            "GET",
            "/employees",
            params={"per": per, "sort": sort},
            error_message="Failed to list employees",
        )
        if isinstance(data, dict):
            # Some deployments wrap the list in an envelope
            data = data.get("employees") or data.get("data") or []
        return [item for item in data or [] if isinstance(item, dict)]

    async def create_employee(self, record: PersonRecord) -> dict[str, Any]:
        return await self._request("POST", "/employees", payload=record.model_dump())

    async def create_job(self, job: JobRecord) -> dict[str, Any]:
        return await self._request("POST", "/jobs", payload=job.model_dump(), error_message="Job creation failed")


def created_person_id(result: Any) -> str | None:
    if not isinstance(result, dict):
        return None
    value = result.get("id") or result.get("employee_id")
    return str(value) if value is not None else None


talenox_client = TalenoxClient()
