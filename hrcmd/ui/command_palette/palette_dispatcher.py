"""
Action dispatch for the command palette.

A selected entry is either navigational (push its href) or side-effecting
(run a registered async action). Side-effecting runs report loading through
a callback and always clear it again, whatever happens inside the executor.
"""

from __future__ import annotations

import logging
import webbrowser
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from hrcmd.exceptions import ActionExecutionError, user_message
from hrcmd.services.types import SearchResult

from .palette_commands import ActionRegistry
from .palette_store import PersonalizationStore

logger = logging.getLogger(__name__)


class DispatchPhase(Enum):
    """Lifecycle of a single dispatch."""

    IDLE = "idle"
    DISPATCHING = "dispatching"
    SUCCESS = "success"
    FAILURE = "failure"


class DispatchOutcome(Enum):
    NAVIGATED = "navigated"
    EXECUTED = "executed"
    FAILED = "failed"
    IGNORED = "ignored"


@dataclass
class DispatchResult:
    """What happened when an entry was dispatched."""

    outcome: DispatchOutcome
    message: str | None = None  # Success notice or error text for the user
    href: str | None = None  # Route pushed, if any
    payload: Any = None  # Executor return value

    @property
    def closes_palette(self) -> bool:
        return self.outcome in (DispatchOutcome.NAVIGATED, DispatchOutcome.EXECUTED)


def _is_external(href: str) -> bool:
    return href.startswith(("http://", "https://"))


class ActionDispatcher:
    """Runs the entry the user picked."""

    def __init__(
        self,
        org_id: str,
        *,
        navigate: Callable[[str], None],
        store: PersonalizationStore,
        actions: ActionRegistry | None = None,
        on_loading: Callable[[bool], None] | None = None,
        open_external: Callable[[str], Any] = webbrowser.open,
    ):
        self.org_id = org_id
        self.navigate = navigate
        self.store = store
        self.actions = actions or ActionRegistry()
        self.on_loading = on_loading
        self.open_external = open_external
        self._phase = DispatchPhase.IDLE

    @property
    def phase(self) -> DispatchPhase:
        return self._phase

    @property
    def busy(self) -> bool:
        return self._phase is DispatchPhase.DISPATCHING

    async def dispatch(self, item: SearchResult, *, force: bool = False) -> DispatchResult:
        """Navigate to or execute ``item``.

        ``force`` is handed to the executor; without it, actions skip work
        that has already been done (e.g. an existing shortlist).
        """
        if item.disabled:
            logger.debug("Ignoring disabled entry %s", item.id)
            return DispatchResult(DispatchOutcome.IGNORED)

        if self.busy:
            logger.info("Ignoring %s while another action is running", item.id)
            return DispatchResult(DispatchOutcome.IGNORED, message="Another action is still running")

        if item.is_navigational:
            self._go(item.href)
            self.store.record_selection(item)
            return DispatchResult(DispatchOutcome.NAVIGATED, href=item.href)

        if item.action is None:
            return DispatchResult(DispatchOutcome.IGNORED)

        return await self._execute(item, force)

    async def _execute(self, item: SearchResult, force: bool) -> DispatchResult:
        action_id = item.action
        spec = self.actions.get(action_id) if action_id else None
        self._transition(DispatchPhase.DISPATCHING)
        self._set_loading(True)

        try:
            if spec is None:
                raise ActionExecutionError(f"Unknown action: {action_id}", action_id=action_id)
            params = {**item.params, "force": force}
            payload = await spec.executor(self.org_id, params)
        except Exception as e:
            self._transition(DispatchPhase.FAILURE)
            fallback = spec.failure_message if spec else "Action failed"
            message = user_message(e, fallback=fallback)
            logger.error("Action %s failed: %s", action_id, e)
            return DispatchResult(DispatchOutcome.FAILED, message=message)
        else:
            self._transition(DispatchPhase.SUCCESS)
            logger.info("Action %s succeeded", action_id)
            self.store.record_selection(item)
            href = spec.follow_up(self.org_id, item.params, payload) if spec.follow_up else None
            if href:
                self._go(href)
            return DispatchResult(
                DispatchOutcome.EXECUTED,
                message=spec.success_message,
                href=href,
                payload=payload,
            )
        finally:
            self._set_loading(False)
            self._transition(DispatchPhase.IDLE)

    def _go(self, href: str) -> None:
        if _is_external(href):
            self.open_external(href)
        else:
            self.navigate(href)

    def _set_loading(self, loading: bool) -> None:
        if self.on_loading:
            self.on_loading(loading)

    def _transition(self, phase: DispatchPhase) -> None:
        logger.debug("Dispatch phase %s -> %s", self._phase.value, phase.value)
        self._phase = phase
