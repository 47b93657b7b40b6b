"""
Command Palette - unified search and actions overlay.

Provides:
- PalettePresenter: palette state machine (open/close, query, selection)
- QueryCoordinator: debounced, generation-stamped provider fan-out
- ActionDispatcher: navigation and side-effecting actions
- PersonalizationStore: persisted recents and pins
- ContextResolver: location-scoped actions
"""

from .palette_commands import ActionRegistry, ActionSpec
from .palette_context import ContextResolver
from .palette_coordinator import QueryCoordinator
from .palette_dispatcher import ActionDispatcher, DispatchOutcome, DispatchPhase, DispatchResult
from .palette_presenter import PalettePresenter, PaletteState
from .palette_ranking import rank_results, score_result
from .palette_store import JsonFileStorage, MemoryStorage, PersonalizationStore

__all__ = [
    "ActionDispatcher",
    "ActionRegistry",
    "ActionSpec",
    "ContextResolver",
    "DispatchOutcome",
    "DispatchPhase",
    "DispatchResult",
    "JsonFileStorage",
    "MemoryStorage",
    "PalettePresenter",
    "PaletteState",
    "PersonalizationStore",
    "QueryCoordinator",
    "rank_results",
    "score_result",
]
