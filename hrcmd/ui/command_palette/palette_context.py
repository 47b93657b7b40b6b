"""
Context actions for the command palette.

Derives extra actions from the location the user is currently viewing,
e.g. "Generate shortlist for this job" while a job page is open. Resolution
is pure: no I/O happens here, the returned entries only name the action the
dispatcher should run.
"""

import re
from urllib.parse import urlsplit

from hrcmd.services.types import ResultKind, SearchResult

ACTION_GENERATE_SHORTLIST = "generate-shortlist"
ACTION_GENERATE_CANDIDATE_SUMMARY = "generate-candidate-summary"

JOB_PATTERN = re.compile(r"^/org/(?P<org>[^/]+)/hiring/jobs/(?P<job_id>[^/]+)")
CANDIDATE_PATTERN = re.compile(r"^/org/(?P<org>[^/]+)/hiring/candidates/(?P<candidate_id>[^/]+)")


def _job_actions(org_id: str, job_id: str) -> list[SearchResult]:
    return [
        SearchResult(
            id=f"ctx-add-{job_id}",
            title="Add candidate to this job",
            subtitle="Open add candidate dialog",
            href=f"/org/{org_id}/hiring/jobs/{job_id}?addCandidate=1",
            kind=ResultKind.ACTION,
        ),
        SearchResult(
            id=f"ctx-shortlist-{job_id}",
            title="Generate shortlist for this job",
            subtitle="AI shortlist for this pipeline",
            href="",
            kind=ResultKind.ACTION,
            action=ACTION_GENERATE_SHORTLIST,
            params={"job_id": job_id},
        ),
        SearchResult(
            id=f"ctx-pipeline-{job_id}",
            title="View pipeline",
            subtitle="Pipeline view",
            href=f"/org/{org_id}/jobs/{job_id}/pipeline",
            kind=ResultKind.ACTION,
            disabled=True,
        ),
    ]


def _candidate_actions(candidate_id: str) -> list[SearchResult]:
    return [
        SearchResult(
            id=f"ctx-summary-{candidate_id}",
            title="Generate AI summary",
            subtitle="AI summary for this candidate",
            href="",
            kind=ResultKind.ACTION,
            action=ACTION_GENERATE_CANDIDATE_SUMMARY,
            params={"candidate_id": candidate_id, "job_id": None},
        ),
    ]


class ContextResolver:
    """Resolves location-scoped actions for one organization."""

    def __init__(self, org_id: str):
        self.org_id = org_id

    def resolve(self, location: str) -> list[SearchResult]:
        """Return the context actions for ``location`` (empty if none apply)."""
        path = urlsplit(location or "").path

        match = JOB_PATTERN.match(path)
        if match and match.group("org") == self.org_id:
            return _job_actions(self.org_id, match.group("job_id"))

        match = CANDIDATE_PATTERN.match(path)
        if match and match.group("org") == self.org_id:
            return _candidate_actions(match.group("candidate_id"))

        return []
