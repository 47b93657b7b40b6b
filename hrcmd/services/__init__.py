"""Service modules for hrcmd."""

from .api_client import HrApiClient
from .types import ResultKind, ScoredResult, SearchResult

__all__ = ["HrApiClient", "ResultKind", "ScoredResult", "SearchResult"]
