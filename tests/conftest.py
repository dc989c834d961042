"""Shared fixtures: an app wired to a temp history file and a scripted backend."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fakes import FakeChatBackend


@pytest.fixture(autouse=True)
def no_credentials(monkeypatch):
    """Keep real provider keys and provider overrides out of every test."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("BRIDGEME_LLM__PROVIDER", raising=False)


@pytest.fixture
def history_path(tmp_path, monkeypatch) -> Path:
    path = tmp_path / "chat-db.json"
    monkeypatch.setenv("BRIDGEME_HISTORY__PATH", str(path))
    return path


@pytest.fixture
def fake_backend() -> FakeChatBackend:
    return FakeChatBackend()


@pytest.fixture
def client(history_path, fake_backend):
    """TestClient over the real app with the LLM backend swapped out.

    Tests that need another backend reassign
    ``app.dependency_overrides[get_chat_backend]``.
    """
    from bridgeme.app import app
    from bridgeme.core.llm import get_chat_backend

    app.dependency_overrides[get_chat_backend] = lambda: fake_backend
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
