from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

TEST_ENV = {
    "ELEVENLABS_AGENT_ID": "agent_test",
    "TWILIO_ACCOUNT_SID": "AC123",
    "TWILIO_AUTH_TOKEN": "token",
    "TWILIO_PHONE_NUMBER": "+15005550006",
    "PUBLIC_BASE_URL": "https://bridge.example.com",
}

# Must be set before importing main, which validates settings at import time.
os.environ.update(TEST_ENV)


@pytest.fixture(scope="session")
def app():
    import importlib

    main = importlib.import_module("main")
    return main.app


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def fresh_settings():
    from config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
