"""
Async client for the HR API.

Only the handful of endpoints the palette needs: listing people, jobs and
candidates for search, and the AI/demo endpoints behind palette actions.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from hrcmd.config import get_api_base_url, get_api_token
from hrcmd.config.constants import API_TIMEOUT_SECONDS
from hrcmd.exceptions import ApiAuthenticationError, ApiConnectionError, ApiResponseError

logger = logging.getLogger(__name__)


def _unwrap_list(payload: Any) -> list[dict[str, Any]]:
    """Accept either a bare list or a {"data": [...]} / {"items": [...]} envelope."""
    if isinstance(payload, dict):
        for key in ("data", "items", "results"):
            if isinstance(payload.get(key), list):
                payload = payload[key]
                break
    if not isinstance(payload, list):
        return []
    return [row for row in payload if isinstance(row, dict)]


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return f"HTTP {response.status_code}"


class HrApiClient:
    """Thin async wrapper over the HR API."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        *,
        timeout: float = API_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or get_api_base_url()).rstrip("/")
        headers = {"Accept": "application/json"}
        token = token if token is not None else get_api_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> HrApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TransportError as e:
            raise ApiConnectionError(f"Cannot reach HR API: {e}", service=self.base_url) from e

        if response.status_code in (401, 403):
            raise ApiAuthenticationError(_error_message(response), service=self.base_url)
        if not response.is_success:
            raise ApiResponseError(
                _error_message(response), status_code=response.status_code, path=path
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiResponseError(
                "HR API returned invalid JSON", status_code=response.status_code, path=path
            ) from e

    # Search data

    async def list_employees(self, org_id: str) -> list[dict[str, Any]]:
        return _unwrap_list(await self._request("GET", f"/orgs/{org_id}/employees"))

    async def list_jobs(self, org_id: str) -> list[dict[str, Any]]:
        return _unwrap_list(await self._request("GET", f"/orgs/{org_id}/jobs"))

    async def list_job_candidates(self, org_id: str, job_id: str) -> list[dict[str, Any]]:
        return _unwrap_list(await self._request("GET", f"/orgs/{org_id}/jobs/{job_id}/candidates"))

    # Actions

    async def seed_demo(self, org_id: str, *, force: bool = False) -> Any:
        logger.info("Seeding demo data for org %s", org_id)
        return await self._request("POST", f"/orgs/{org_id}/ats/demo", json={"force": force})

    async def generate_job_shortlist(self, org_id: str, job_id: str, *, force: bool = False) -> Any:
        return await self._request(
            "POST", f"/orgs/{org_id}/ats/jobs/{job_id}/shortlist", json={"force": force}
        )

    async def generate_candidate_summary(
        self,
        org_id: str,
        candidate_id: str,
        *,
        job_id: str | None = None,
        force: bool = False,
    ) -> Any:
        return await self._request(
            "POST",
            f"/orgs/{org_id}/ats/candidates/{candidate_id}/summary",
            json={"jobId": job_id, "force": force},
        )
