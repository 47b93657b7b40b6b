"""
Presenter for the command palette.

Owns the palette lifecycle (closed/open), routes keystrokes to the query
coordinator and selections to the action dispatcher. It is the only writer
of PaletteState; every change is pushed to subscribers.
"""

from __future__ import annotations

import asyncio
import logging
import webbrowser
from collections.abc import Callable, Collection, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Protocol

from hrcmd.config.constants import DEBOUNCE_MS, DEFAULT_PROVIDER_TIMEOUT_SECONDS
from hrcmd.services.types import ResultKind, ScoredResult, SearchProvider, SearchResult

from .palette_commands import ActionRegistry
from .palette_context import ContextResolver
from .palette_coordinator import QueryCoordinator
from .palette_dispatcher import ActionDispatcher, DispatchOutcome, DispatchResult
from .palette_store import PersonalizationStore

logger = logging.getLogger(__name__)

TOGGLE_KEYS = frozenset({"ctrl+k", "meta+k", "cmd+k", "super+k"})
CLOSE_KEYS = frozenset({"escape"})

StateListener = Callable[["PaletteState"], None]
KeyListener = Callable[[str], bool]


class KeySource(Protocol):
    """Anything that can deliver global key presses, e.g. the Textual host app."""

    def add_key_listener(self, listener: KeyListener) -> None: ...

    def remove_key_listener(self, listener: KeyListener) -> None: ...


@dataclass
class PaletteState:
    """Current state of the palette."""

    open: bool = False
    query: str = ""
    loading: bool = False
    results: list[ScoredResult] = field(default_factory=list)
    selected_index: int = 0
    error: str | None = None  # Last action failure, shown until the next action
    notice: str | None = None  # Last action success message
    context_actions: list[SearchResult] = field(default_factory=list)
    recents: list[SearchResult] = field(default_factory=list)
    pinned: list[SearchResult] = field(default_factory=list)
    kinds: frozenset[ResultKind] = frozenset()  # Empty means all kinds


class PalettePresenter:
    """
    Command palette state machine.

    Closed <-> Open via ctrl/cmd+k, Escape always closes. Opening starts
    from an empty query and result list.
    """

    def __init__(
        self,
        org_id: str,
        *,
        navigate: Callable[[str], None],
        providers: Sequence[SearchProvider] = (),
        store: PersonalizationStore | None = None,
        actions: ActionRegistry | None = None,
        location: str = "",
        on_state_update: StateListener | None = None,
        debounce_seconds: float = DEBOUNCE_MS / 1000.0,
        provider_timeout: float | None = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
        open_external: Callable[[str], Any] = webbrowser.open,
    ):
        self.org_id = org_id
        self._navigate_callback = navigate
        self._listeners: list[StateListener] = [on_state_update] if on_state_update else []
        self.store = store or PersonalizationStore(org_id)
        self.resolver = ContextResolver(org_id)
        self._location = location
        self._state = PaletteState(context_actions=self.resolver.resolve(location))
        self._searching = False
        self._dispatching = False

        self.coordinator = QueryCoordinator(
            org_id,
            providers,
            on_results=self._apply_results,
            on_loading=self._set_searching,
            recents=lambda: self.store.recents,
            context_items=lambda: self._state.context_actions,
            debounce_seconds=debounce_seconds,
            provider_timeout=provider_timeout,
        )
        self.dispatcher = ActionDispatcher(
            org_id,
            navigate=self._navigate,
            store=self.store,
            actions=actions,
            on_loading=self._set_dispatching,
            open_external=open_external,
        )

    @property
    def state(self) -> PaletteState:
        """Get current state."""
        return self._state

    @property
    def location(self) -> str:
        return self._location

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify_update(self) -> None:
        """Notify listeners of state change."""
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                logger.error("Palette state listener failed: %s", e, exc_info=True)

    async def load_initial_state(self) -> None:
        """Load persisted recents and pins off the event loop."""
        await asyncio.to_thread(self.store.load)
        self._refresh_personalization()
        self._notify_update()

    def _refresh_personalization(self) -> None:
        self._state.recents = self.store.recents
        self._state.pinned = self.store.pinned

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Open the palette with a fresh, empty query."""
        if self._state.open:
            return
        self.coordinator.cancel()
        state = self._state
        state.open = True
        state.query = ""
        state.results = []
        state.selected_index = 0
        state.error = None
        state.notice = None
        state.context_actions = self.resolver.resolve(self._location)
        self._refresh_personalization()
        logger.debug("Palette opened at %s", self._location or "/")
        self._notify_update()

    def close(self) -> None:
        """Close the palette and drop any pending or in-flight search."""
        if not self._state.open:
            return
        self.coordinator.cancel()
        state = self._state
        state.open = False
        state.query = ""
        state.results = []
        state.selected_index = 0
        state.error = None
        logger.debug("Palette closed")
        self._notify_update()

    def toggle(self) -> None:
        if self._state.open:
            self.close()
        else:
            self.open()

    def handle_key(self, key: str) -> bool:
        """Handle a global key press. Returns True if the palette consumed it."""
        key = key.lower()
        if key in TOGGLE_KEYS:
            self.toggle()
            return True
        if key in CLOSE_KEYS:
            was_open = self._state.open
            self.close()
            return was_open
        return False

    @contextmanager
    def attach(self, source: KeySource) -> Iterator[PalettePresenter]:
        """Listen for hotkeys on ``source`` for the duration of the block."""
        source.add_key_listener(self.handle_key)
        try:
            yield self
        finally:
            source.remove_key_listener(self.handle_key)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def set_query(self, query: str) -> None:
        """Route the input text to the coordinator. Ignored while closed."""
        if not self._state.open:
            return
        self._state.query = query
        self._state.error = None
        self._notify_update()
        self.coordinator.submit(query, self._state.kinds)

    def set_kinds(self, kinds: Collection[ResultKind]) -> None:
        """Restrict results to ``kinds`` (empty for all) and re-run the query."""
        self._state.kinds = frozenset(kinds)
        self._notify_update()
        if self._state.open and self._state.query:
            self.coordinator.submit(self._state.query, self._state.kinds)

    def set_location(self, location: str) -> None:
        """Update the current location and recompute context actions."""
        self._location = location
        self._state.context_actions = self.resolver.resolve(location)
        self._notify_update()

    def _apply_results(self, query: str, results: list[ScoredResult]) -> None:
        if not self._state.open:
            return
        self._state.results = results
        self._state.selected_index = 0
        self._notify_update()

    def _set_searching(self, searching: bool) -> None:
        self._searching = searching
        self._sync_loading()

    def _set_dispatching(self, dispatching: bool) -> None:
        self._dispatching = dispatching
        self._sync_loading()

    def _sync_loading(self) -> None:
        loading = self._searching or self._dispatching
        if self._state.loading == loading:
            return
        self._state.loading = loading
        self._notify_update()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def move_selection(self, delta: int) -> None:
        """Move selection up or down."""
        if not self._state.results:
            return

        new_index = self._state.selected_index + delta
        new_index = max(0, min(new_index, len(self._state.results) - 1))
        self._state.selected_index = new_index
        self._notify_update()

    def get_selected_result(self) -> SearchResult | None:
        """Get the currently selected result."""
        if not self._state.results:
            return None
        if 0 <= self._state.selected_index < len(self._state.results):
            return self._state.results[self._state.selected_index].result
        return None

    async def select(
        self, item: SearchResult | None = None, *, force: bool = False
    ) -> DispatchResult | None:
        """
        Dispatch ``item`` (or the selected result).

        Navigation and successful actions close the palette. A failed action
        keeps it open with the error message on the state.
        """
        item = item or self.get_selected_result()
        if item is None:
            return None

        result = await self.dispatcher.dispatch(item, force=force)

        if result.outcome is DispatchOutcome.FAILED:
            self._state.error = result.message
            self._state.notice = None
            self._refresh_personalization()
            self._notify_update()
        elif result.closes_palette:
            self._state.notice = result.message
            self._refresh_personalization()
            if self._state.open:
                self.close()
            else:
                self._notify_update()
        return result

    def toggle_pin(self, item: SearchResult) -> bool:
        """Pin or unpin ``item``. Returns True if it is now pinned."""
        pinned = self.store.toggle_pin(item)
        self._state.pinned = self.store.pinned
        self._notify_update()
        return pinned

    def pin_label(self, item: SearchResult) -> str:
        return "Unpin" if self.store.is_pinned(item) else "Pin"

    def _navigate(self, href: str) -> None:
        self._navigate_callback(href)
        self.set_location(href)
