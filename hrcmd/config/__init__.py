"""Configuration for hrcmd."""

from .settings import (
    get_api_base_url,
    get_api_token,
    get_debounce_seconds,
    get_env_info,
    get_env_var,
    get_log_level,
    get_provider_timeout,
    get_state_dir,
    validate_all_env_vars,
    validate_env_var,
)

__all__ = [
    "get_api_base_url",
    "get_api_token",
    "get_debounce_seconds",
    "get_env_info",
    "get_env_var",
    "get_log_level",
    "get_provider_timeout",
    "get_state_dir",
    "validate_all_env_vars",
    "validate_env_var",
]
