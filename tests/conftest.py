"""Pytest configuration and fixtures."""

import pytest


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Isolate environment variables and config files for each test.

    This prevents a developer's own ``bibkeys`` configuration from
    leaking into test results.
    """
    monkeypatch.delenv("BIBKEYS_DEFAULT_PATTERN", raising=False)
    monkeypatch.delenv("BIBKEYS_MAX_DEPTH", raising=False)
    monkeypatch.delenv("BIBKEYS_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    yield
