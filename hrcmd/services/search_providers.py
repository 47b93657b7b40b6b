"""
Search providers backed by the HR API.

Each provider fetches one kind of record and filters it locally by
case-insensitive containment. API errors propagate as
ProviderError; the query coordinator isolates them so one failing source
never empties the whole palette.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any

from hrcmd.config.constants import CANDIDATE_JOB_SCAN_LIMIT, PROVIDER_RESULT_LIMIT
from hrcmd.exceptions import ApiError, ProviderError
from hrcmd.services.types import ResultKind, SearchProvider, SearchResult
from hrcmd.ui.command_palette.palette_commands import search_static

from .api_client import HrApiClient

logger = logging.getLogger(__name__)


def _includes(value: Any, query: str) -> bool:
    return isinstance(value, str) and query.lower() in value.lower()


def _full_name(record: dict[str, Any]) -> str:
    return " ".join(part for part in (record.get("firstName"), record.get("lastName")) if part)


class HrSearchProviders:
    """People, job and candidate providers sharing one API client."""

    def __init__(self, client: HrApiClient, *, limit: int = PROVIDER_RESULT_LIMIT):
        self.client = client
        self.limit = limit

    async def _fetch(self, provider: str, request: Awaitable[list[dict[str, Any]]]) -> list[dict[str, Any]]:
        try:
            return await request
        except ApiError as e:
            raise ProviderError(f"{provider} search failed: {e.message}", provider=provider) from e

    async def search_people(self, org_id: str, query: str) -> list[SearchResult]:
        people = await self._fetch("people", self.client.list_employees(org_id))
        matches = [
            p for p in people if _includes(_full_name(p), query) or _includes(p.get("email"), query)
        ]
        return [
            SearchResult(
                id=str(p.get("id")),
                title=_full_name(p),
                subtitle=p.get("title") or p.get("email") or "",
                href=f"/org/{org_id}/people/{p.get('id')}",
                kind=ResultKind.PERSON,
            )
            for p in matches[: self.limit]
        ]

    async def search_jobs(self, org_id: str, query: str) -> list[SearchResult]:
        jobs = await self._fetch("jobs", self.client.list_jobs(org_id))
        matches = [
            j for j in jobs if _includes(j.get("title"), query) or _includes(j.get("department"), query)
        ]
        return [
            SearchResult(
                id=str(j.get("id")),
                title=j.get("title") or "Untitled job",
                subtitle=" · ".join(part for part in (j.get("department"), j.get("location")) if part),
                href=f"/org/{org_id}/hiring/jobs/{j.get('id')}",
                kind=ResultKind.JOB,
            )
            for j in matches[: self.limit]
        ]

    async def search_candidates(self, org_id: str, query: str) -> list[SearchResult]:
        """Candidates of the first few jobs; a failing job is skipped."""
        jobs = await self._fetch("candidates", self.client.list_jobs(org_id))
        candidates: list[dict[str, Any]] = []
        for job in jobs[:CANDIDATE_JOB_SCAN_LIMIT]:
            try:
                candidates.extend(await self.client.list_job_candidates(org_id, str(job.get("id"))))
            except ApiError as e:
                logger.warning("Listing candidates failed for job %s: %s", job.get("id"), e)

        matches = [
            c
            for c in candidates
            if _includes(_full_name(c), query) or _includes(c.get("email"), query)
        ]
        return [
            SearchResult(
                id=str(c.get("id")),
                title=_full_name(c),
                subtitle=c.get("email") or "",
                href=f"/org/{org_id}/hiring/candidates/{c.get('id')}",
                kind=ResultKind.CANDIDATE,
            )
            for c in matches[: self.limit]
        ]

    def all(self) -> list[SearchProvider]:
        """Every provider in emission order: built-ins first, then remote sources."""
        return [search_static, self.search_people, self.search_jobs, self.search_candidates]
