import pytest
from fastapi.testclient import TestClient

from learnportal.config import PortalConfig
from learnportal.main import create_app
from learnportal.storage.backends import JsonFileStorage

ADMIN_KEY = "s3cret-admin"


class FakeAIClient:
    def __init__(self, reply="Use Ctrl+B to make text bold.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, system, user):
        self.calls.append((system, user))
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def config(tmp_path):
    return PortalConfig(
        data_dir=str(tmp_path),
        admin_key=ADMIN_KEY,
        admin_codes=["africa2025"],
        flush_interval_seconds=3600,
    )


@pytest.fixture
def ai_client():
    return FakeAIClient()


@pytest.fixture
def make_client(config, ai_client):
    """Start a fresh app over the same data dir, as a process restart would"""
    def _make(**overrides):
        storage = overrides.pop("storage", None) or JsonFileStorage(config.data_dir)
        app = create_app(config, storage=storage, ai_client=overrides.pop("ai_client", ai_client))
        return TestClient(app)
    return _make


@pytest.fixture
def client(make_client):
    with make_client() as c:
        yield c


def register(client, email="a@x.com", password="p", **extra):
    body = {
        "fullname": "Ada Lovelace",
        "email": email,
        "phone": "+254700000000",
        "country": "Kenya",
        "idcard": "ID-1",
        "password": password,
    }
    body.update(extra)
    return client.post("/api/signup", json=body)
