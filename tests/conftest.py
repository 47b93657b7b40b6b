"""Shared pytest fixtures for hrcmd tests."""

import logging

import pytest

from hrcmd.ui.command_palette import MemoryStorage, PersonalizationStore
from factories import ORG


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep every test away from the real home directory and HRCMD_* settings."""
    for name in (
        "HRCMD_API_URL",
        "HRCMD_API_TOKEN",
        "HRCMD_DEBOUNCE_MS",
        "HRCMD_PROVIDER_TIMEOUT",
        "HRCMD_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("HRCMD_STATE_DIR", str(tmp_path / "state"))
    yield tmp_path

    # The CLI attaches handlers bound to streams that are gone after the test
    logging.getLogger("hrcmd").handlers.clear()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    """An empty personalization store for the test organization."""
    return PersonalizationStore(ORG, storage)
