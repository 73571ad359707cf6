"""Shared fixtures: offscreen Qt and a scripted HTTP session."""
import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sunday.api import SundayClient  # noqa: E402
from sunday.config import ClientConfig  # noqa: E402


class FakeResponse:
    def __init__(self, payload=None, status_code=200, reason="OK", invalid_json=False):
        self._payload = payload
        self.status_code = status_code
        self.reason = reason
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._payload


class FakeSession:
    """Stands in for ``requests.Session``; replies are queued per test."""

    def __init__(self):
        self.headers = {}
        self.calls = []
        self.replies = []

    def reply(self, payload=None, **kwargs):
        self.replies.append(FakeResponse(payload, **kwargs))

    def ok(self, data=None):
        self.reply({"success": True, "data": data if data is not None else {}})

    def fail_with(self, exc):
        self.replies.append(exc)

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def last_call(self):
        return self.calls[-1]


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    config = ClientConfig(base_url="https://example.test", username="jdoe", role="technician")
    return SundayClient(config, session=session)


@pytest.fixture(scope="session")
def qapp():
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
