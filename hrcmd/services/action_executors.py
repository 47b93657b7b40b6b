"""Side-effecting palette actions backed by the HR API."""

from __future__ import annotations

from typing import Any

from hrcmd.ui.command_palette.palette_commands import (
    ACTION_SEED_DEMO,
    ActionRegistry,
    ActionSpec,
)
from hrcmd.ui.command_palette.palette_context import (
    ACTION_GENERATE_CANDIDATE_SUMMARY,
    ACTION_GENERATE_SHORTLIST,
)

from .api_client import HrApiClient


def _require(params: dict[str, Any], name: str) -> str:
    value = params.get(name)
    if not value:
        raise ValueError(f"Missing parameter: {name}")
    return str(value)


def seeded_job_href(org_id: str, params: dict[str, Any], result: Any) -> str | None:
    """Route to the job created by the demo seed, if the API returned one."""
    if not isinstance(result, dict):
        return None
    job = result.get("job")
    job_id = job.get("id") if isinstance(job, dict) else None
    job_id = job_id or result.get("jobId")
    return f"/org/{org_id}/hiring/jobs/{job_id}" if job_id else None


def shortlisted_job_href(org_id: str, params: dict[str, Any], result: Any) -> str | None:
    job_id = params.get("job_id")
    return f"/org/{org_id}/hiring/jobs/{job_id}" if job_id else None


def build_action_registry(client: HrApiClient) -> ActionRegistry:
    """Register the built-in actions against ``client``."""

    async def seed_demo(org_id: str, params: dict[str, Any]) -> Any:
        return await client.seed_demo(org_id, force=bool(params.get("force", False)))

    async def generate_shortlist(org_id: str, params: dict[str, Any]) -> Any:
        return await client.generate_job_shortlist(
            org_id, _require(params, "job_id"), force=bool(params.get("force", False))
        )

    async def generate_candidate_summary(org_id: str, params: dict[str, Any]) -> Any:
        return await client.generate_candidate_summary(
            org_id,
            _require(params, "candidate_id"),
            job_id=params.get("job_id"),
            force=bool(params.get("force", False)),
        )

    registry = ActionRegistry()
    registry.register(
        ActionSpec(
            id=ACTION_SEED_DEMO,
            name="Seed demo data",
            executor=seed_demo,
            success_message="Seeded demo job and candidates",
            failure_message="Unable to seed demo data",
            follow_up=seeded_job_href,
        )
    )
    registry.register(
        ActionSpec(
            id=ACTION_GENERATE_SHORTLIST,
            name="Generate shortlist",
            executor=generate_shortlist,
            success_message="Shortlist generated",
            failure_message="Unable to generate shortlist",
            follow_up=shortlisted_job_href,
        )
    )
    registry.register(
        ActionSpec(
            id=ACTION_GENERATE_CANDIDATE_SUMMARY,
            name="Generate AI summary",
            executor=generate_candidate_summary,
            success_message="AI summary requested",
            failure_message="Unable to generate summary",
        )
    )
    return registry
