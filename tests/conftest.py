import os

os.environ["ENABLE_UI"] = "false"
os.environ["CONVERSATION_BACKEND"] = "memory"
os.environ["JWT_SECRET"] = "test-secret-with-at-least-32-bytes-of-entropy"

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.ai_service import AiService


class FakeCompletions:
    def __init__(self):
        self.calls = []
        self.reply = "Great job! Let's keep practicing."
        self.error = None

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeModels:
    def __init__(self):
        self.error = None

    async def list(self):
        if self.error is not None:
            raise self.error
        return []


class FakeOpenAI:
    """Stands in for AsyncOpenAI; records every chat completion request"""

    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)
        self.models = FakeModels()


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def ai_service(fake_openai):
    return AiService(client=fake_openai, api_key="test-key", model="gpt-test")


@pytest.fixture
def client(ai_service):
    app = create_app(ai_service=ai_service, enable_ui=False)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def unconfigured_client():
    app = create_app(ai_service=AiService(api_key=""), enable_ui=False)
    with TestClient(app) as c:
        yield c


def register(client, email="alice@example.com", username="alice", password="s3cretpass"):
    resp = client.post(
        "/api/auth/register",
        json={"email": email, "username": username, "password": password},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    return register(client)


@pytest.fixture
def alice_headers(alice):
    return auth(alice["tokens"]["accessToken"])
