"""
Ranking for command palette results.

Scores are additive and depend only on the arguments, so the same inputs
always produce the same order.
"""

from collections.abc import Iterable, Sequence

from hrcmd.config.constants import (
    SCORE_KIND_ACTION,
    SCORE_KIND_PAGE,
    SCORE_RECENT,
    SCORE_SUBTITLE_CONTAINS,
    SCORE_TITLE_CONTAINS,
    SCORE_TITLE_PREFIX,
)
from hrcmd.services.types import ResultKind, ScoredResult, SearchResult

KIND_BONUS = {
    ResultKind.ACTION: SCORE_KIND_ACTION,
    ResultKind.PAGE: SCORE_KIND_PAGE,
}


def _is_prefix_match(title: str, query: str) -> bool:
    """True if the title, or any word in it, starts with the query."""
    if title.startswith(query):
        return True
    return any(word.startswith(query) for word in title.split())


def score_result(item: SearchResult, query: str, recents: Iterable[SearchResult]) -> int:
    """
    Score a single result for a query.

    Signals:
    - title or any word of it starts with the query: +100, otherwise title
      contains query: +40
    - subtitle contains query: +15
    - action: +30, page: +20
    - href among the recents: +25
    """
    q = query.strip().lower()
    title = item.title.lower()
    subtitle = (item.subtitle or "").lower()
    score = 0

    if q:
        if _is_prefix_match(title, q):
            score += SCORE_TITLE_PREFIX
        elif q in title:
            score += SCORE_TITLE_CONTAINS
        if q in subtitle:
            score += SCORE_SUBTITLE_CONTAINS

    score += KIND_BONUS.get(item.kind, 0)

    if item.href and any(r.href == item.href for r in recents):
        score += SCORE_RECENT

    return score


def rank_results(
    items: Sequence[SearchResult],
    query: str,
    recents: Sequence[SearchResult],
) -> list[ScoredResult]:
    """Score and order results, highest first.

    ``sorted`` is stable, so equal scores keep the order providers emitted.
    """
    scored = [ScoredResult(result=item, score=score_result(item, query, recents)) for item in items]
    return sorted(scored, key=lambda s: -s.score)
