"""
Built-in palette entries and the action registry.

Pages and quick actions are static per organization and are offered through
a provider like any other data source. Side-effecting actions are looked up
by id in an ActionRegistry when the dispatcher runs them.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from hrcmd.services.types import ActionExecutor, ResultKind, SearchResult

logger = logging.getLogger(__name__)

ACTION_SEED_DEMO = "seed-demo"

# Follow-up navigation after a successful action: (org_id, params, result) -> href
FollowUp = Callable[[str, dict[str, Any], Any], str | None]


@dataclass
class ActionSpec:
    """A side-effecting action that can be run from the palette."""

    id: str  # Stable identifier, e.g. "seed-demo"
    name: str  # Display name
    executor: ActionExecutor
    success_message: str
    failure_message: str
    follow_up: FollowUp | None = None


class ActionRegistry:
    """Registry of side-effecting actions for the palette."""

    def __init__(self) -> None:
        self._actions: dict[str, ActionSpec] = {}

    def register(self, spec: ActionSpec) -> None:
        """Register an action, replacing any previous one with the same id."""
        self._actions[spec.id] = spec
        logger.debug("Registered action: %s", spec.id)

    def unregister(self, action_id: str) -> bool:
        """Unregister an action. Returns True if found."""
        if action_id in self._actions:
            del self._actions[action_id]
            return True
        return False

    def get(self, action_id: str) -> ActionSpec | None:
        return self._actions.get(action_id)

    def ids(self) -> list[str]:
        return sorted(self._actions)

    def __contains__(self, action_id: object) -> bool:
        return action_id in self._actions


def static_pages(org_id: str) -> list[SearchResult]:
    """Top-level pages of the workspace."""
    pages = [
        ("dashboard", "Dashboard", "dashboard"),
        ("people", "People", "people"),
        ("hiring", "Hiring", "hiring"),
        ("timeoff", "Time Off", "time-off"),
        ("performance", "Performance", "performance"),
        ("settings", "Settings", "settings"),
        ("billing", "Billing", "settings/billing"),
    ]
    return [
        SearchResult(id=page_id, title=title, href=f"/org/{org_id}/{path}", kind=ResultKind.PAGE)
        for page_id, title, path in pages
    ]


def quick_actions(org_id: str) -> list[SearchResult]:
    """Actions available everywhere in the workspace."""
    return [
        SearchResult(
            id="create-job",
            title="Create job",
            subtitle="Open hiring to create a new job",
            href=f"/org/{org_id}/hiring?createJob=1",
            kind=ResultKind.ACTION,
        ),
        SearchResult(
            id="add-candidate",
            title="Add candidate",
            subtitle="Go to hiring to add a candidate",
            href=f"/org/{org_id}/hiring",
            kind=ResultKind.ACTION,
        ),
        SearchResult(
            id=ACTION_SEED_DEMO,
            title="Seed demo data",
            subtitle="Create a demo job and candidates",
            href="",
            kind=ResultKind.ACTION,
            action=ACTION_SEED_DEMO,
        ),
    ]


def matches_query(item: SearchResult, query: str) -> bool:
    """Case-insensitive containment on title or subtitle."""
    q = query.strip().lower()
    if not q:
        return False
    return q in item.title.lower() or q in (item.subtitle or "").lower()


async def search_static(org_id: str, query: str) -> list[SearchResult]:
    """Provider over the built-in pages and quick actions."""
    return [
        item for item in [*static_pages(org_id), *quick_actions(org_id)] if matches_query(item, query)
    ]
