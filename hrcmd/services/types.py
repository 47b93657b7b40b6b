"""Shared result types for the palette and its services."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResultKind(Enum):
    """Kinds of results the palette can show."""

    PAGE = "page"
    ACTION = "action"
    PERSON = "person"
    JOB = "job"
    CANDIDATE = "candidate"


@dataclass
class SearchResult:
    """A single selectable palette entry.

    Navigational entries carry an ``href``. Side-effecting entries have an
    empty ``href`` and name the registered ``action`` to run with ``params``.
    """

    id: str
    title: str
    href: str
    kind: ResultKind
    subtitle: str | None = None
    action: str | None = None  # Stable action id for side-effecting entries
    params: dict[str, Any] = field(default_factory=dict)
    disabled: bool = False

    @property
    def key(self) -> tuple[str, str]:
        """Identity used for deduplication."""
        return (self.href, self.title)

    @property
    def is_navigational(self) -> bool:
        return bool(self.href) and self.action is None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "href": self.href,
            "kind": self.kind.value,
        }
        if self.subtitle is not None:
            data["subtitle"] = self.subtitle
        if self.action is not None:
            data["action"] = self.action
        if self.params:
            data["params"] = dict(self.params)
        if self.disabled:
            data["disabled"] = True
        return data

    @classmethod
    def from_dict(cls, data: Any) -> SearchResult:
        """Build a result from its JSON form.

        Raises:
            ValueError: If required fields are missing or malformed.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")
        try:
            title = data["title"]
            kind = ResultKind(data["kind"])
        except KeyError as e:
            raise ValueError(f"Missing field: {e.args[0]}") from e
        if not isinstance(title, str):
            raise ValueError("title must be a string")
        href = data.get("href") or ""
        params = data.get("params") or {}
        if not isinstance(href, str) or not isinstance(params, dict):
            raise ValueError("href must be a string and params an object")
        subtitle = data.get("subtitle")
        return cls(
            id=str(data.get("id") or href or title),
            title=title,
            href=href,
            kind=kind,
            subtitle=str(subtitle) if subtitle is not None else None,
            action=data.get("action"),
            params=params,
            disabled=bool(data.get("disabled", False)),
        )


@dataclass
class ScoredResult:
    """A result paired with its ranking score for the current query."""

    result: SearchResult
    score: int

    @property
    def title(self) -> str:
        return self.result.title


# (org_id, query) -> results
SearchProvider = Callable[[str, str], Awaitable[list[SearchResult]]]

# (org_id, params) -> executor-specific payload
ActionExecutor = Callable[[str, dict[str, Any]], Awaitable[Any]]
