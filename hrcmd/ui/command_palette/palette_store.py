"""
Personalization store for the command palette.

Keeps two bounded, per-organization lists:
- recents: most-recent-first history of selections, deduplicated by (href, title)
- pins: user-curated shortcuts, toggled by href

Persisted as JSON arrays of ``{"item": ..., "timestamp": ...}``. Storage is
best-effort: unreadable state loads as empty lists and failed writes are
logged, while the in-memory lists stay authoritative for the session.
"""

from __future__ import annotations

import json
import logging
import re
import time
from pathlib import Path
from typing import Any, Protocol

from hrcmd.config.constants import (
    MAX_PINNED,
    MAX_RECENTS,
    PINS_KEY_PREFIX,
    RECENTS_KEY_PREFIX,
)
from hrcmd.exceptions import PersistenceError
from hrcmd.services.types import SearchResult

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class KeyValueStorage(Protocol):
    """Minimal string key/value storage used by the store."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """In-process storage, useful for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStorage:
    """One JSON file per key under a state directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def read(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError("Failed to read palette state", key=key) from e

    def write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".json.tmp")
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            raise PersistenceError("Failed to write palette state", key=key) from e


def _dedupe(items: list[SearchResult], key) -> list[SearchResult]:
    seen: set = set()
    unique = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        unique.append(item)
    return unique


class PersonalizationStore:
    """Recents and pins for one organization."""

    def __init__(
        self,
        org_id: str,
        storage: KeyValueStorage | None = None,
        *,
        max_recents: int = MAX_RECENTS,
        max_pinned: int = MAX_PINNED,
    ):
        self.org_id = org_id
        self.storage = storage if storage is not None else MemoryStorage()
        self.max_recents = max_recents
        self.max_pinned = max_pinned
        self._recents: list[SearchResult] = []
        self._pinned: list[SearchResult] = []
        self._timestamps: dict[tuple[str, str], float] = {}
        self._loaded = False

    @property
    def recents_key(self) -> str:
        return f"{RECENTS_KEY_PREFIX}_{self.org_id}"

    @property
    def pins_key(self) -> str:
        return f"{PINS_KEY_PREFIX}_{self.org_id}"

    @property
    def recents(self) -> list[SearchResult]:
        return list(self._recents)

    @property
    def pinned(self) -> list[SearchResult]:
        return list(self._pinned)

    def is_pinned(self, item: SearchResult) -> bool:
        return any(p.href == item.href for p in self._pinned)

    def load(self) -> None:
        """Load both lists from storage, falling back to empty lists on any error."""
        self._recents = _dedupe(self._read_list(self.recents_key), lambda r: r.key)[
            : self.max_recents
        ]
        self._pinned = _dedupe(self._read_list(self.pins_key), lambda r: r.href)[
            : self.max_pinned
        ]
        self._loaded = True
        self._prune_timestamps()
        logger.debug(
            "Loaded %d recents and %d pins for org %s",
            len(self._recents),
            len(self._pinned),
            self.org_id,
        )

    def record_selection(self, item: SearchResult) -> None:
        """Move ``item`` to the front of the recents, capped at max_recents."""
        self._ensure_loaded()
        remaining = [r for r in self._recents if r.key != item.key]
        self._recents = [item, *remaining][: self.max_recents]
        self._timestamps[item.key] = time.time()
        self._prune_timestamps()
        self._persist(self.recents_key, self._recents)

    def toggle_pin(self, item: SearchResult) -> bool:
        """Pin or unpin ``item`` by href. Returns True if it is now pinned."""
        self._ensure_loaded()
        if self.is_pinned(item):
            self._pinned = [p for p in self._pinned if p.href != item.href]
            pinned = False
        else:
            self._pinned = [item, *self._pinned][: self.max_pinned]
            self._timestamps[item.key] = time.time()
            pinned = True
        self._prune_timestamps()
        self._persist(self.pins_key, self._pinned)
        return pinned

    def clear(self) -> None:
        self._recents = []
        self._pinned = []
        self._timestamps.clear()
        self._loaded = True
        self._persist(self.recents_key, self._recents)
        self._persist(self.pins_key, self._pinned)

    def _ensure_loaded(self) -> None:
        # Mutating before the first load would overwrite the stored lists
        if not self._loaded:
            self.load()

    def _prune_timestamps(self) -> None:
        live = {item.key for item in (*self._recents, *self._pinned)}
        self._timestamps = {k: v for k, v in self._timestamps.items() if k in live}

    def _read_list(self, key: str) -> list[SearchResult]:
        try:
            raw = self.storage.read(key)
            if not raw:
                return []
            entries = json.loads(raw)
            if not isinstance(entries, list):
                raise ValueError(f"Expected a list, got {type(entries).__name__}")
            items = []
            for entry in entries:
                # Accept bare items as well as {"item": ..., "timestamp": ...}
                if isinstance(entry, dict) and "item" in entry:
                    item = SearchResult.from_dict(entry["item"])
                    timestamp = entry.get("timestamp")
                    if isinstance(timestamp, (int, float)):
                        self._timestamps[item.key] = float(timestamp)
                else:
                    item = SearchResult.from_dict(entry)
                items.append(item)
            return items
        except Exception as e:
            logger.warning("Discarding unreadable palette state %s: %s", key, e)
            return []

    def _serialize(self, items: list[SearchResult]) -> str:
        entries: list[dict[str, Any]] = []
        for item in items:
            entry: dict[str, Any] = {"item": item.to_dict()}
            timestamp = self._timestamps.get(item.key)
            if timestamp is not None:
                entry["timestamp"] = timestamp
            entries.append(entry)
        return json.dumps(entries)

    def _persist(self, key: str, items: list[SearchResult]) -> None:
        try:
            self.storage.write(key, self._serialize(items))
        except Exception as e:
            logger.warning("Failed to persist palette state %s: %s", key, e)
