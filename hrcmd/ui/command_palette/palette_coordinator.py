"""
Query coordination for the command palette.

Debounces keystrokes, fans each query out to every registered provider at
once, and applies only the newest response. Providers cannot be cancelled,
so every dispatch is stamped with a generation number and a response whose
generation is no longer current is dropped.

Must be driven from a running asyncio event loop.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable, Collection, Sequence

from hrcmd.config.constants import (
    DEBOUNCE_MS,
    DEFAULT_PROVIDER_TIMEOUT_SECONDS,
    MIN_QUERY_LENGTH,
)
from hrcmd.services.types import ResultKind, ScoredResult, SearchProvider, SearchResult

from .palette_commands import matches_query
from .palette_ranking import rank_results

logger = logging.getLogger(__name__)


def _provider_name(provider: SearchProvider) -> str:
    return getattr(provider, "__name__", None) or repr(provider)


class QueryCoordinator:
    """Debounced, generation-stamped fan-out over search providers."""

    def __init__(
        self,
        org_id: str,
        providers: Sequence[SearchProvider] | None = None,
        *,
        on_results: Callable[[str, list[ScoredResult]], None],
        on_loading: Callable[[bool], None],
        recents: Callable[[], Sequence[SearchResult]] = list,
        context_items: Callable[[], Sequence[SearchResult]] = list,
        debounce_seconds: float = DEBOUNCE_MS / 1000.0,
        provider_timeout: float | None = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
        min_query_length: int = MIN_QUERY_LENGTH,
    ):
        self.org_id = org_id
        self._providers: list[SearchProvider] = list(providers or [])
        self._on_results = on_results
        self._on_loading = on_loading
        self._recents = recents
        self._context_items = context_items
        self.debounce_seconds = debounce_seconds
        self.provider_timeout = provider_timeout
        self.min_query_length = min_query_length
        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._inflight: set[asyncio.Task] = set()
        self._loading = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def pending(self) -> bool:
        """True while a debounced dispatch is waiting to fire."""
        return self._timer is not None

    @property
    def providers(self) -> list[SearchProvider]:
        return list(self._providers)

    def register_provider(self, provider: SearchProvider) -> None:
        self._providers.append(provider)

    def is_short(self, query: str) -> bool:
        return len(query.strip()) < self.min_query_length

    def submit(self, query: str, kinds: Collection[ResultKind] | None = None) -> None:
        """Schedule a search for ``query`` after the debounce delay.

        Short queries clear the results immediately and call no provider.
        """
        self._cancel_timer()

        if self.is_short(query):
            self._invalidate()
            self._on_results(query, [])
            return

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce_seconds, self._fire, query, kinds)

    def cancel(self) -> None:
        """Drop any pending search and make in-flight responses stale."""
        self._cancel_timer()
        self._invalidate()

    async def flush(self) -> None:
        """Wait for every in-flight dispatch to settle."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    async def dispatch(
        self, query: str, kinds: Collection[ResultKind] | None = None
    ) -> list[ScoredResult] | None:
        """Run one search immediately.

        Returns the published results, or None if a newer query superseded
        this one before its providers settled.
        """
        if self.is_short(query):
            self._invalidate()
            self._on_results(query, [])
            return []

        self._generation += 1
        generation = self._generation
        self._set_loading(True)

        try:
            batches = await asyncio.gather(
                *(self._call_provider(provider, query) for provider in self._providers)
            )

            if generation != self._generation:
                logger.debug(
                    "Discarding stale results for %r (generation %d, current %d)",
                    query,
                    generation,
                    self._generation,
                )
                return None

            merged = self._merge(query, batches, kinds)
            ranked = rank_results(merged, query, self._recents())
            self._on_results(query, ranked)
            return ranked
        finally:
            if generation == self._generation:
                self._set_loading(False)

    def _fire(self, query: str, kinds: Collection[ResultKind] | None) -> None:
        self._timer = None
        task = asyncio.ensure_future(self.dispatch(query, kinds))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _invalidate(self) -> None:
        self._generation += 1
        self._set_loading(False)

    def _set_loading(self, loading: bool) -> None:
        if self._loading == loading:
            return
        self._loading = loading
        self._on_loading(loading)

    async def _call_provider(self, provider: SearchProvider, query: str) -> list[SearchResult]:
        """Call one provider; failures and timeouts contribute nothing."""
        name = _provider_name(provider)
        try:
            if self.provider_timeout:
                results = await asyncio.wait_for(
                    provider(self.org_id, query), timeout=self.provider_timeout
                )
            else:
                results = await provider(self.org_id, query)
        except asyncio.TimeoutError:
            logger.warning(
                "Search provider %s timed out after %.1fs", name, self.provider_timeout
            )
            return []
        except Exception as e:
            logger.warning("Search provider %s failed: %s", name, e)
            return []

        return [r for r in (results or []) if isinstance(r, SearchResult)]

    def _merge(
        self,
        query: str,
        batches: Sequence[Sequence[SearchResult]],
        kinds: Collection[ResultKind] | None,
    ) -> list[SearchResult]:
        """Concatenate context matches and provider batches, first occurrence wins."""
        context = [item for item in self._context_items() if matches_query(item, query)]
        seen: set[tuple[str, str]] = set()
        merged = []
        for item in itertools.chain(context, *batches):
            if item.key in seen:
                continue
            if kinds and item.kind not in kinds:
                continue
            seen.add(item.key)
            merged.append(item)
        return merged
