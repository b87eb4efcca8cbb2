"""
Unit test configuration for Autolock.

Keeps every test away from the user's real ~/.autolock.
"""

import pytest


@pytest.fixture(autouse=True)
def isolated_autolock_dir(tmp_path, monkeypatch):
    """Point AUTOLOCK_DIR and AUTOLOCK_STATE_DIR at a temp directory."""
    base = tmp_path / "autolock-home"
    monkeypatch.setenv("AUTOLOCK_DIR", str(base))
    monkeypatch.setenv("AUTOLOCK_STATE_DIR", str(base / "sessions"))

    from autolock import config
    monkeypatch.setattr(config, "CONFIG_PATH", base / "config.yaml")
    return base
