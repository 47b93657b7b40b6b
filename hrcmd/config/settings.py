"""Configuration utilities for hrcmd."""

import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..exceptions import ConfigurationError
from .constants import (
    DEFAULT_STATE_DIRNAME,
    ENV_VAR_DEFINITIONS,
    HRCMD_CONFIG_DIR,
)


def validate_env_var(name: str, value: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a single environment variable value.

    Args:
        name: The environment variable name.
        value: The current value (or None if not set).

    Returns:
        Tuple of (is_valid, error_message).
    """
    if name not in ENV_VAR_DEFINITIONS:
        return True, None  # Unknown vars are always valid

    if value is None:
        return True, None

    valid_values = ENV_VAR_DEFINITIONS[name].get("valid_values")
    if valid_values is None:
        return True, None

    if value.lower() not in [v.lower() for v in valid_values]:
        return False, f"Invalid value '{value}' for {name}. Valid values: {valid_values}"

    return True, None


def validate_all_env_vars() -> List[str]:
    """Validate all hrcmd environment variables.

    Returns:
        List of error messages (empty if all valid).
    """
    errors = []
    for name in ENV_VAR_DEFINITIONS:
        is_valid, error = validate_env_var(name, os.environ.get(name))
        if not is_valid:
            errors.append(error)
    return errors


def get_env_var(name: str, validate: bool = True) -> Optional[str]:
    """Get an environment variable with optional validation.

    Args:
        name: The environment variable name.
        validate: Whether to validate the value against known definitions.

    Returns:
        The environment variable value, its default, or None if not set.

    Raises:
        ConfigurationError: If validate=True and the value is invalid.
    """
    value = os.environ.get(name)

    if validate and value is not None:
        is_valid, error = validate_env_var(name, value)
        if not is_valid:
            raise ConfigurationError(error, setting=name)

    if value is None and name in ENV_VAR_DEFINITIONS:
        return ENV_VAR_DEFINITIONS[name].get("default")

    return value


def _get_float(name: str) -> float:
    raw = get_env_var(name)
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}", setting=name) from e
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative", setting=name)
    return value


def get_api_base_url() -> str:
    """Base URL of the HR API, without a trailing slash."""
    return str(get_env_var("HRCMD_API_URL")).rstrip("/")


def get_api_token() -> Optional[str]:
    return get_env_var("HRCMD_API_TOKEN")


def get_state_dir() -> Path:
    """Directory holding persisted palette state.

    Respects HRCMD_STATE_DIR so tests and sandboxes never touch the real
    config directory.
    """
    override = get_env_var("HRCMD_STATE_DIR")
    if override:
        return Path(override).expanduser()
    return HRCMD_CONFIG_DIR / DEFAULT_STATE_DIRNAME


def get_debounce_seconds() -> float:
    return _get_float("HRCMD_DEBOUNCE_MS") / 1000.0


def get_provider_timeout() -> Optional[float]:
    """Per-provider timeout in seconds, or None when disabled."""
    value = _get_float("HRCMD_PROVIDER_TIMEOUT")
    return value or None


def get_log_level() -> str:
    return str(get_env_var("HRCMD_LOG_LEVEL")).upper()


def get_env_info() -> Dict[str, Dict]:
    """Get information about all hrcmd environment variables."""
    info = {}
    for name, definition in ENV_VAR_DEFINITIONS.items():
        value = os.environ.get(name)
        is_valid, error = validate_env_var(name, value)
        info[name] = {
            "description": definition["description"],
            "value": value,
            "default": definition.get("default"),
            "is_set": value is not None,
            "is_valid": is_valid,
            "error": error,
        }
    return info
