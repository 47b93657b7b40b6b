"""Custom exception hierarchy for hrcmd.

Exception Hierarchy:
    HrcmdError (base)
    ├── ApiError - HR API calls
    │   ├── ApiConnectionError (retryable)
    │   ├── ApiAuthenticationError
    │   └── ApiResponseError
    ├── ProviderError - A search provider failed
    ├── ActionExecutionError - A side-effecting palette action failed
    ├── PersistenceError - Recents/pins storage could not be read or written
    └── ConfigurationError - Settings/configuration issues

None of these are fatal to the palette: provider and persistence errors are
absorbed where they occur, action errors are surfaced as a message, and only
the CLI turns them into an exit code.

Usage:
    from hrcmd.exceptions import ApiResponseError

    try:
        response = await client.get(path)
    except httpx.TransportError as e:
        raise ApiConnectionError("HR API unreachable", service=base_url) from e
"""

from typing import Any, Optional


class HrcmdError(Exception):
    """Base exception for all hrcmd errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., IDs, paths)
        retryable: Whether this error might succeed on retry
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        **context: Any,
    ) -> None:
        self.message = message
        self.context = context
        self.retryable = retryable
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


def user_message(error: BaseException, fallback: str = "Something went wrong") -> str:
    """Return the human-readable message carried by an error.

    hrcmd errors expose their bare ``message`` (without the context suffix);
    anything else falls back to ``str(error)`` and then to ``fallback``.
    """
    if isinstance(error, HrcmdError):
        return error.message or fallback
    text = str(error).strip()
    return text or fallback


# =============================================================================
# API Errors
# =============================================================================


class ApiError(HrcmdError):
    """Base exception for HR API calls."""

    pass


class ApiConnectionError(ApiError):
    """Failed to reach the HR API - typically retryable."""

    def __init__(
        self,
        message: str = "API connection failed",
        *,
        service: Optional[str] = None,
        **context: Any,
    ) -> None:
        if service:
            context["service"] = service
        super().__init__(message, retryable=True, **context)


class ApiAuthenticationError(ApiError):
    """The HR API rejected our credentials."""

    def __init__(
        self,
        message: str = "API authentication failed",
        *,
        service: Optional[str] = None,
        **context: Any,
    ) -> None:
        if service:
            context["service"] = service
        super().__init__(message, retryable=False, **context)


class ApiResponseError(ApiError):
    """The HR API answered with a non-success status."""

    def __init__(
        self,
        message: str = "API request failed",
        *,
        status_code: Optional[int] = None,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.status_code = status_code
        if status_code is not None:
            context["status_code"] = status_code
        if path:
            context["path"] = path
        retryable = status_code is not None and status_code >= 500
        super().__init__(message, retryable=retryable, **context)


# =============================================================================
# Palette Errors
# =============================================================================


class ProviderError(HrcmdError):
    """A search provider failed to produce results."""

    def __init__(
        self,
        message: str = "Search provider failed",
        *,
        provider: Optional[str] = None,
        **context: Any,
    ) -> None:
        if provider:
            context["provider"] = provider
        super().__init__(message, **context)


class ActionExecutionError(HrcmdError):
    """A side-effecting palette action failed."""

    def __init__(
        self,
        message: str = "Action failed",
        *,
        action_id: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.action_id = action_id
        if action_id:
            context["action_id"] = action_id
        super().__init__(message, **context)


class PersistenceError(HrcmdError):
    """Palette state could not be read from or written to storage."""

    def __init__(
        self,
        message: str = "Persistence failed",
        *,
        key: Optional[str] = None,
        **context: Any,
    ) -> None:
        if key:
            context["key"] = key
        super().__init__(message, **context)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(HrcmdError):
    """Configuration or settings error."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: Optional[str] = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)
