"""
Tests for the exception hierarchy and CLI error handling
"""

import pytest
import typer

from hrcmd.error_handling import handle_error, safe_operation
from hrcmd.exceptions import (
    ActionExecutionError,
    ApiAuthenticationError,
    ApiConnectionError,
    ApiError,
    ApiResponseError,
    ConfigurationError,
    HrcmdError,
    PersistenceError,
    ProviderError,
    user_message,
)


class TestHrcmdError:
    """Test custom error classes"""

    def test_message_with_context(self):
        error = HrcmdError("Something broke", org="acme", attempt=2)

        assert error.message == "Something broke"
        assert error.context == {"org": "acme", "attempt": 2}
        assert str(error) == "Something broke (org='acme', attempt=2)"
        assert error.retryable is False

    def test_message_without_context(self):
        assert str(HrcmdError("Plain")) == "Plain"

    def test_hierarchy(self):
        for cls in (ApiConnectionError, ApiAuthenticationError, ApiResponseError):
            assert issubclass(cls, ApiError)
        for cls in (ApiError, ProviderError, ActionExecutionError, PersistenceError, ConfigurationError):
            assert issubclass(cls, HrcmdError)

    def test_connection_errors_are_retryable(self):
        error = ApiConnectionError(service="http://hr.test")
        assert error.retryable is True
        assert error.context == {"service": "http://hr.test"}

    @pytest.mark.parametrize("status, retryable", [(400, False), (404, False), (500, True), (None, False)])
    def test_response_error_retryable_by_status(self, status, retryable):
        assert ApiResponseError(status_code=status).retryable is retryable

    def test_action_error_keeps_action_id(self):
        error = ActionExecutionError("Unknown action: x", action_id="x")
        assert error.action_id == "x"
        assert error.context == {"action_id": "x"}


class TestUserMessage:
    def test_hrcmd_error_uses_bare_message(self):
        error = ApiResponseError("Job not found", status_code=404, path="/orgs/acme/jobs/1")
        assert user_message(error) == "Job not found"

    def test_other_errors_use_str(self):
        assert user_message(ValueError("Missing parameter: job_id")) == "Missing parameter: job_id"

    def test_empty_message_falls_back(self):
        assert user_message(RuntimeError(), fallback="Unable to seed demo data") == "Unable to seed demo data"
        assert user_message(HrcmdError(""), fallback="Nope") == "Nope"


class TestHandleError:
    """Test the CLI error boundary"""

    def test_handle_error_exits(self, capsys):
        with pytest.raises(typer.Exit) as exc_info:
            handle_error(ApiConnectionError("Cannot reach HR API"), "search")

        assert exc_info.value.exit_code == 1
        captured = capsys.readouterr()
        assert "Cannot reach HR API" in captured.err
        assert "HRCMD_API_URL" in captured.err

    def test_unexpected_error(self, capsys):
        with pytest.raises(typer.Exit):
            handle_error(KeyError("boom"), "search", show_details=True)

        captured = capsys.readouterr()
        assert "unexpected error occurred during search" in captured.err

    def test_safe_operation_passes_through_success(self):
        @safe_operation("double")
        def double(x):
            return x * 2

        assert double(21) == 42
        assert double.__name__ == "double"

    def test_safe_operation_converts_errors(self):
        @safe_operation("explode")
        def explode():
            raise ConfigurationError("bad setting", setting="HRCMD_DEBOUNCE_MS")

        with pytest.raises(typer.Exit) as exc_info:
            explode()
        assert exc_info.value.exit_code == 1

    def test_safe_operation_keeps_exit_codes(self):
        @safe_operation("bail")
        def bail():
            raise typer.Exit(3)

        with pytest.raises(typer.Exit) as exc_info:
            bail()
        assert exc_info.value.exit_code == 3

    def test_safe_operation_keyboard_interrupt(self):
        @safe_operation("wait")
        def wait():
            raise KeyboardInterrupt

        with pytest.raises(typer.Exit) as exc_info:
            wait()
        assert exc_info.value.exit_code == 130
