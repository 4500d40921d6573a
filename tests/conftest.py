"""Pytest configuration and fixtures for reaper tests."""

import json
import os

import pytest

from preview_reaper.config import Settings


RUNNER_PREFIXES = ("GITHUB_", "INPUT_", "DOPPLER_")
RUNNER_VARS = ("DOTENV_ME", "PR_NUMBER", "REQUIRE_PREVIEW_SUFFIX", "LOG_LEVEL", "PGPASSWORD")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep variables from the machine running the tests out of Settings."""
    for key in list(os.environ):
        if key.startswith(RUNNER_PREFIXES) or key in RUNNER_VARS:
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_settings():
    """Build Settings from the environment plus overrides."""
    def _make(**overrides) -> Settings:
        return Settings(**overrides)
    return _make


@pytest.fixture
def event_file(tmp_path):
    """Write an event payload and return its path."""
    def _write(payload: dict) -> str:
        path = tmp_path / "event.json"
        path.write_text(json.dumps(payload))
        return str(path)
    return _write


@pytest.fixture
def pull_request_payload():
    """Build a GitHub pull request object."""
    def _build(number: int = 42, head: str = "feature/login", base: str = "main") -> dict:
        return {
            "number": number,
            "title": "Add login",
            "head": {"ref": head, "sha": "abc123"},
            "base": {"ref": base, "sha": "def456"},
        }
    return _build
