"""
Error handling for the hrcmd CLI

The palette engine itself never lets errors escape: providers and persistence
degrade to empty results, and action failures become a message on the
palette state. This module is the outer boundary for CLI commands, turning
any remaining failure into a rich panel on stderr and an exit code.
"""

import functools
import logging
from typing import Any, Callable, Dict, Optional, TypeVar

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .exceptions import (
    ApiAuthenticationError,
    ApiConnectionError,
    ConfigurationError,
    HrcmdError,
)

# Errors go to stderr so --json output stays parseable
console = Console(stderr=True, color_system="auto")

logger = logging.getLogger("hrcmd")

F = TypeVar("F", bound=Callable[..., Any])


def _suggestion_for(error: HrcmdError) -> Optional[str]:
    if isinstance(error, ApiConnectionError):
        return "Check HRCMD_API_URL and that the HR API is reachable."
    if isinstance(error, ApiAuthenticationError):
        return "Set a valid token in HRCMD_API_TOKEN."
    if isinstance(error, ConfigurationError):
        return "Run `hrcmd env` to inspect the current configuration."
    return None


def _title_for(error: Exception) -> str:
    if isinstance(error, HrcmdError):
        name = type(error).__name__.replace("Error", "")
        return f"{name or 'Hrcmd'} Error"
    return "Unexpected Error"


def handle_error(
    error: Exception,
    operation: str = "unknown",
    context: Optional[Dict[str, Any]] = None,
    show_details: bool = False,
) -> None:
    """
    Log an error, show it to the user and exit.

    Args:
        error: The exception to handle
        operation: Description of the operation that failed
        context: Additional context for logging
        show_details: Whether to show technical details to user

    Raises:
        typer.Exit: Always, with exit code 1
    """
    context = dict(context or {})

    if isinstance(error, HrcmdError):
        context.update(error.context)
        logger.error("%s failed: %s", operation, error.message, extra={"context": context})
        message_text = error.message
        suggestion = _suggestion_for(error)
    else:
        logger.error("Unexpected error during %s: %s", operation, error, exc_info=True)
        message_text = f"An unexpected error occurred during {operation}"
        context["original_error"] = str(error)
        context["error_type"] = type(error).__name__
        suggestion = "Run again with --verbose and check ~/.config/hrcmd/hrcmd.log."

    message = Text()
    message.append(message_text, style="bold red")

    if show_details and context:
        details_text = "\n".join(f"- {k}: {v}" for k, v in context.items())
        message.append(f"\n\nDetails:\n{details_text}", style="dim red")

    if suggestion:
        message.append(f"\n\nSuggestion: {suggestion}", style="cyan")

    console.print(
        Panel(
            message,
            title=f"[bold]{_title_for(error)}[/bold]",
            title_align="left",
            border_style="red",
            padding=(0, 1),
        )
    )
    raise typer.Exit(1)


def safe_operation(operation_name: str, show_details: bool = False) -> Callable[[F], F]:
    """
    Decorator for CLI commands that routes uncaught errors through handle_error.

    Args:
        operation_name: Name of the operation for error messages
        show_details: Whether to show technical details on error
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except (typer.Exit, typer.Abort):
                raise
            except KeyboardInterrupt:
                console.print("\n[yellow]Operation cancelled by user[/yellow]")
                raise typer.Exit(130)
            except Exception as e:
                handle_error(e, operation_name, show_details=show_details)

        return wrapper  # type: ignore[return-value]

    return decorator
