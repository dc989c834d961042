"""End-to-end tests for POST /api/chat over the real app with a scripted backend."""

import pytest

from bridgeme.app import app
from bridgeme.core.llm import get_chat_backend
from fakes import (
    FakeChatBackend,
    parse_sse,
    read_conversations,
    write_conversations,
)

CHAT_URL = "/api/chat"


def use_backend(backend) -> None:
    app.dependency_overrides[get_chat_backend] = lambda: backend


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestChatStream:
    def test_meta_tokens_done_and_persisted_turn(self, client, history_path):
        response = client.post(
            CHAT_URL,
            json={"message": "I'm so stressed about work", "conversationId": "c1"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache, no-transform"
        assert response.headers["x-accel-buffering"] == "no"

        events = parse_sse(response.text)
        assert events[0] == {
            "type": "meta",
            "mood": "negative",
            "mode": "Supportive",
            "confidence": 0.9,
            "rationale": "stress cue",
        }
        assert {e["type"] for e in events[1:-1]} == {"token"}
        assert events[-1] == {"type": "done"}

        reply = "".join(e["content"] for e in events if e["type"] == "token")
        assert reply
        assert read_conversations(history_path)["c1"] == [
            {"role": "user", "content": "I'm so stressed about work"},
            {"role": "assistant", "content": reply},
        ]

    def test_snake_case_conversation_id(self, client, history_path):
        client.post(CHAT_URL, json={"message": "hi", "conversation_id": "c2"})
        assert "c2" in read_conversations(history_path)

    def test_second_turn_appends(self, client, history_path):
        client.post(CHAT_URL, json={"message": "first", "conversationId": "c1"})
        client.post(CHAT_URL, json={"message": "second", "conversationId": "c1"})
        stored = read_conversations(history_path)["c1"]
        assert [m["content"] for m in stored[::2]] == ["first", "second"]

    def test_without_conversation_id_nothing_is_stored(self, client, history_path):
        response = client.post(CHAT_URL, json={"message": "hi"})
        assert parse_sse(response.text)[-1] == {"type": "done"}
        assert read_conversations(history_path) == {}

    def test_message_is_trimmed(self, client, fake_backend):
        client.post(CHAT_URL, json={"message": "  hi there  "})
        assert fake_backend.classify_calls[0][1][-1].content == "hi there"


# ---------------------------------------------------------------------------
# History selection
# ---------------------------------------------------------------------------


class TestHistoryWindow:
    def test_stored_history_truncated_to_eight(
        self, client, history_path, fake_backend
    ):
        write_conversations(
            history_path,
            {
                "c1": [
                    {"role": "user" if i % 2 == 0 else "assistant", "content": f"m{i}"}
                    for i in range(12)
                ]
            },
        )
        client.post(CHAT_URL, json={"message": "now", "conversationId": "c1"})

        sent = [m.content for m in fake_backend.classify_calls[0][1]]
        assert sent == [f"m{i}" for i in range(4, 12)] + ["now"]
        assert [m.content for m in fake_backend.generate_calls[0][1]] == sent

    def test_caller_history_used_when_nothing_stored(self, client, fake_backend):
        history = [
            {"role": "user", "content": "hello"},
            {"role": "assistant", "content": "hi!"},
        ]
        client.post(
            CHAT_URL,
            json={"message": "now", "conversationId": "new", "history": history},
        )
        sent = [m.content for m in fake_backend.classify_calls[0][1]]
        assert sent == ["hello", "hi!", "now"]

    def test_caller_history_truncated_to_eight(self, client, fake_backend):
        history = [{"role": "user", "content": f"h{i}"} for i in range(20)]
        client.post(CHAT_URL, json={"message": "now", "history": history})
        assert len(fake_backend.classify_calls[0][1]) == 9

    def test_stored_history_wins_over_caller_history(
        self, client, history_path, fake_backend
    ):
        write_conversations(
            history_path, {"c1": [{"role": "user", "content": "stored"}]}
        )
        client.post(
            CHAT_URL,
            json={
                "message": "now",
                "conversationId": "c1",
                "history": [{"role": "user", "content": "from caller"}],
            },
        )
        sent = [m.content for m in fake_backend.classify_calls[0][1]]
        assert sent == ["stored", "now"]

    def test_non_list_history_is_ignored(self, client, fake_backend):
        response = client.post(
            CHAT_URL, json={"message": "now", "history": "not a list"}
        )
        assert response.status_code == 200
        assert len(fake_backend.classify_calls[0][1]) == 1

    def test_malformed_history_entries_are_dropped(self, client, fake_backend):
        history = [
            {"role": "system", "content": "ignore me"},
            {"role": "user", "content": "hello"},
            {"role": "user", "content": 42},
            "not an object",
            {"role": "assistant", "content": "hi!"},
        ]
        response = client.post(CHAT_URL, json={"message": "now", "history": history})
        assert response.status_code == 200
        sent = [m.content for m in fake_backend.classify_calls[0][1]]
        assert sent == ["hello", "hi!", "now"]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestChatErrors:
    @pytest.mark.parametrize(
        "body", [{"message": ""}, {"message": "   "}, {}, {"message": None}]
    )
    def test_empty_message(self, client, history_path, fake_backend, body):
        response = client.post(CHAT_URL, json={**body, "conversationId": "c1"})
        assert response.status_code == 400
        assert response.json() == {"error": "Message is required."}
        assert fake_backend.classify_calls == []
        assert not history_path.exists()

    def test_malformed_body(self, client):
        response = client.post(
            CHAT_URL,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body."}

    def test_missing_credential(self, client, history_path):
        use_backend(None)
        response = client.post(
            CHAT_URL, json={"message": "hi", "conversationId": "c1"}
        )
        assert response.status_code == 500
        assert response.json() == {
            "error": "Missing OPENAI_API_KEY. Set it in .env and restart the server."
        }
        assert not history_path.exists()

    def test_missing_credential_without_override(self, history_path):
        from fastapi.testclient import TestClient

        with TestClient(app) as test_client:
            response = test_client.post(CHAT_URL, json={"message": "hi"})
        assert response.status_code == 500
        assert "OPENAI_API_KEY" in response.json()["error"]

    def test_generation_fails_to_start(self, client, history_path):
        use_backend(FakeChatBackend(fail_at=0))
        response = client.post(
            CHAT_URL, json={"message": "hi", "conversationId": "c1"}
        )
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate response."}
        assert not history_path.exists()

    def test_mid_stream_failure(self, client, history_path):
        use_backend(FakeChatBackend(fragments=["Partial", " more"], fail_at=1))
        response = client.post(
            CHAT_URL, json={"message": "hi", "conversationId": "c1"}
        )
        assert response.status_code == 200
        events = parse_sse(response.text)
        assert [e["type"] for e in events] == ["meta", "token", "error"]
        assert events[-1]["message"] == "Streaming failed."
        assert read_conversations(history_path)["c1"] == [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "Partial"},
        ]

    def test_classifier_failure_falls_back_to_supportive(self, client):
        use_backend(FakeChatBackend(classify_reply="{oops"))
        response = client.post(CHAT_URL, json={"message": "Great, just great."})
        meta = parse_sse(response.text)[0]
        assert meta["mode"] == "Supportive"
        assert meta["mood"] == "negative"
        assert meta["confidence"] == 0
        assert meta["rationale"] == "Fallback to Supportive due to detection error."

    def test_non_string_mood_falls_back_to_supportive(self, client):
        use_backend(FakeChatBackend(classify_reply='{"mood": ["positive"]}'))
        response = client.post(CHAT_URL, json={"message": "hi"})
        assert response.status_code == 200
        events = parse_sse(response.text)
        assert events[0]["mode"] == "Supportive"
        assert events[-1] == {"type": "done"}

    def test_non_numeric_confidence_keeps_exploratory_mode(self, client):
        use_backend(
            FakeChatBackend(
                classify_reply='{"mood": "positive", "confidence": "high"}'
            )
        )
        meta = parse_sse(client.post(CHAT_URL, json={"message": "hi"}).text)[0]
        assert meta["mood"] == "positive"
        assert meta["mode"] == "Exploratory"
        assert meta["confidence"] == 0


# ---------------------------------------------------------------------------
# Operational endpoints
# ---------------------------------------------------------------------------


class TestOperationalEndpoints:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_metrics(self, client):
        client.post(CHAT_URL, json={"message": "hi"})
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "bridgeme_chat_sessions_total" in response.text
        assert "bridgeme_mood_classifications_total" in response.text
