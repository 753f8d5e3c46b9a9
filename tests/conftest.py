"""
Global test configuration.
"""

import os
from pathlib import Path

import pytest

from telegram_bot_http import TelegramHttp
from tests.helpers import RecordingTransport


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast, isolated unit tests")
    config.addinivalue_line(
        "markers", "allow_env_pollution: keep TELEGRAM_* environment variables"
    )


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_telegram_env(request, monkeypatch):
    """Ensure a clean TELEGRAM_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("TELEGRAM_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def transport() -> RecordingTransport:
    """Transport that records requests and answers with canned responses."""
    return RecordingTransport()


@pytest.fixture
def http(transport) -> TelegramHttp:
    """Client wired to the recording transport."""
    return TelegramHttp("123456:TEST-TOKEN", transport)


@pytest.fixture
def photo_path(tmp_path) -> Path:
    """A small file standing in for a JPEG."""
    path = tmp_path / "a.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")
    return path
