"""
Centralized constants for hrcmd.

This module contains the tunables for the command palette engine: debounce
timing, personalization limits, ranking weights and provider limits. Keeping
them here makes it easy to see how the palette behaves at a glance.
"""

from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

HRCMD_CONFIG_DIR = Path.home() / ".config" / "hrcmd"
DEFAULT_STATE_DIRNAME = "state"
DEFAULT_LOG_FILENAME = "hrcmd.log"

# =============================================================================
# QUERY COORDINATION
# =============================================================================

DEBOUNCE_MS = 250  # Delay between last keystroke and provider fan-out
MIN_QUERY_LENGTH = 2  # Shorter queries clear results without any provider call
DEFAULT_PROVIDER_TIMEOUT_SECONDS = 8.0  # Per-provider bound; 0 disables

# =============================================================================
# PERSONALIZATION
# =============================================================================

MAX_RECENTS = 8
MAX_PINNED = 8
RECENTS_KEY_PREFIX = "recents"
PINS_KEY_PREFIX = "pins"

# =============================================================================
# RANKING WEIGHTS
# =============================================================================

SCORE_TITLE_PREFIX = 100
SCORE_TITLE_CONTAINS = 40
SCORE_SUBTITLE_CONTAINS = 15
SCORE_KIND_ACTION = 30
SCORE_KIND_PAGE = 20
SCORE_RECENT = 25

# =============================================================================
# PROVIDERS
# =============================================================================

PROVIDER_RESULT_LIMIT = 10  # Max results contributed by each remote provider
CANDIDATE_JOB_SCAN_LIMIT = 5  # Jobs scanned when collecting candidates
DEFAULT_API_URL = "http://localhost:4000/api"
API_TIMEOUT_SECONDS = 15.0

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_VAR_DEFINITIONS = {
    "HRCMD_API_URL": {
        "description": "Base URL of the HR API",
        "default": DEFAULT_API_URL,
        "valid_values": None,
    },
    "HRCMD_API_TOKEN": {
        "description": "Bearer token sent with every API request",
        "default": None,
        "valid_values": None,
    },
    "HRCMD_STATE_DIR": {
        "description": "Directory holding persisted recents and pins",
        "default": None,
        "valid_values": None,
    },
    "HRCMD_DEBOUNCE_MS": {
        "description": "Debounce delay in milliseconds",
        "default": str(DEBOUNCE_MS),
        "valid_values": None,
    },
    "HRCMD_PROVIDER_TIMEOUT": {
        "description": "Per-provider timeout in seconds (0 disables)",
        "default": str(DEFAULT_PROVIDER_TIMEOUT_SECONDS),
        "valid_values": None,
    },
    "HRCMD_LOG_LEVEL": {
        "description": "Log level for the hrcmd logger",
        "default": "WARNING",
        "valid_values": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    },
}
