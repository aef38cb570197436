import pytest
from fastapi.testclient import TestClient

from agent.agent import get_responder
from agent.core.memory import SessionMemory, get_memory
from app.main import app


class FakeResponder:
    """Records calls and answers with a canned reply, or raises."""

    def __init__(self, reply="Look for something made of stone.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def __call__(self, policy, message):
        self.calls.append((policy, message))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture()
def make_responder():
    return FakeResponder


@pytest.fixture()
def responder(make_responder):
    return make_responder()


@pytest.fixture()
def memory():
    return SessionMemory(ttl_seconds=3600)


@pytest.fixture()
def client(memory, responder):
    app.dependency_overrides[get_memory] = lambda: memory
    app.dependency_overrides[get_responder] = lambda: responder
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
