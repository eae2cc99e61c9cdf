from __future__ import annotations

import os

import pytest

from coinwagon.settings import CoinwagonSettings


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep tests independent of the developer's env, .env and config files."""
    for key in list(os.environ):
        if key.startswith("COINWAGON_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config():
    return CoinwagonSettings(request_timeout_seconds=1.0)
