"""Tests for the terminal client: SSE parsing, payload shape and rendering."""

import io
import json

import httpx
import pytest

from cli.bridgeme_cli import BridgeMeCLI
from cli.cases import EDGE_CASES, TEST_CASES
from cli.client import ChatAPIClient
from cli.config import CLIConfig
from cli.formatter import ResponseFormatter, format_badge

META = {
    "type": "meta",
    "mood": "negative",
    "mode": "Supportive",
    "confidence": 0.9,
    "rationale": "stress cue",
}


def sse_body(*events: dict) -> bytes:
    return "".join(f"data: {json.dumps(e)}\n\n" for e in events).encode()


def make_client(handler) -> ChatAPIClient:
    return ChatAPIClient(CLIConfig(), transport=httpx.MockTransport(handler))


class TestCLIConfig:
    def test_defaults(self):
        config = CLIConfig()
        assert config.chat_url == "http://localhost:8000/api/chat"
        assert config.history_window == 8


class TestChatAPIClient:
    @pytest.mark.asyncio
    async def test_parses_stream_and_sends_payload(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            body = sse_body(
                META, {"type": "token", "content": "Hi"}, {"type": "done"}
            )
            return httpx.Response(
                200, content=body, headers={"content-type": "text/event-stream"}
            )

        client = make_client(handler)
        history = [{"role": "user", "content": "earlier"}]
        events = [e async for e in client.chat("hello", "cid-1", history)]
        await client.close()

        assert [e["type"] for e in events] == ["meta", "token", "done"]
        assert json.loads(requests[0].content) == {
            "message": "hello",
            "conversationId": "cid-1",
            "history": history,
        }
        assert requests[0].headers["accept"] == "text/event-stream"

    @pytest.mark.asyncio
    async def test_error_response_becomes_error_event(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "Message is required."})

        client = make_client(handler)
        events = [e async for e in client.chat("", "cid-1")]
        await client.close()

        assert events == [
            {"type": "error", "message": "HTTP 400: Message is required."}
        ]

    @pytest.mark.asyncio
    async def test_connection_error_becomes_error_event(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)
        events = [e async for e in client.chat("hi", "cid-1")]
        await client.close()

        assert events[0]["type"] == "error"
        assert "Connection error" in events[0]["message"]

    @pytest.mark.asyncio
    async def test_unparseable_data_lines_are_skipped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            body = b"data: {broken\n\n" + sse_body({"type": "done"})
            return httpx.Response(200, content=body)

        client = make_client(handler)
        events = [e async for e in client.chat("hi", "cid-1")]
        await client.close()
        assert events == [{"type": "done"}]


class TestResponseFormatter:
    def test_renders_badge_and_tokens(self):
        out = io.StringIO()
        formatter = ResponseFormatter(out)
        for event in (
            META,
            {"type": "token", "content": "Hello"},
            {"type": "token", "content": " there"},
            {"type": "done"},
        ):
            formatter.handle_event(event)
        formatter.finish_response()

        assert formatter.reply == "Hello there"
        assert formatter.meta == META
        assert "[Supportive] negative (90%) - stress cue" in out.getvalue()
        assert out.getvalue().endswith("Hello there\n")

    def test_records_error(self):
        formatter = ResponseFormatter(io.StringIO())
        formatter.handle_event({"type": "error", "message": "Streaming failed."})
        assert formatter.error == "Streaming failed."

    def test_badge_without_confidence(self):
        badge = format_badge({"mode": "Exploratory", "mood": "neutral"})
        assert badge.startswith("[Exploratory] neutral (0%)")


class TestBridgeMeCLI:
    @pytest.mark.asyncio
    async def test_sends_recent_history_and_records_turns(self):
        payloads = []

        def handler(request: httpx.Request) -> httpx.Response:
            payloads.append(json.loads(request.content))
            body = sse_body(META, {"type": "token", "content": "ok"}, {"type": "done"})
            return httpx.Response(200, content=body)

        config = CLIConfig()
        cli = BridgeMeCLI(
            config,
            client=ChatAPIClient(config, transport=httpx.MockTransport(handler)),
            output=io.StringIO(),
        )
        for i in range(6):
            await cli.send(f"message {i}")
        await cli.client.close()

        assert len(cli.messages) == 12
        assert len(payloads[-1]["history"]) == 8
        assert payloads[-1]["history"][-2:] == [
            {"role": "user", "content": "message 4"},
            {"role": "assistant", "content": "ok"},
        ]
        assert {p["conversationId"] for p in payloads} == {cli.conversation_id}

    def test_new_conversation_resets_state(self):
        cli = BridgeMeCLI(CLIConfig(), output=io.StringIO())
        cli.messages.append({"role": "user", "content": "x"})
        old_id = cli.conversation_id
        cli.new_conversation()
        assert cli.messages == []
        assert cli.conversation_id != old_id

    @pytest.mark.asyncio
    async def test_run_cases_compares_expected_and_detected(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=sse_body(META, {"type": "done"}))

        config = CLIConfig()
        out = io.StringIO()
        cli = BridgeMeCLI(
            config,
            client=ChatAPIClient(config, transport=httpx.MockTransport(handler)),
            output=out,
        )
        await cli.run_cases()

        negatives = sum(1 for c in TEST_CASES if c.mood == "negative")
        assert f"Matched {negatives}/{len(TEST_CASES)} moods." in out.getvalue()
        for edge in EDGE_CASES:
            assert edge.message in out.getvalue()


class TestCases:
    def test_case_counts(self):
        assert len(TEST_CASES) == 15
        assert len(EDGE_CASES) == 7

    def test_expected_modes_follow_moods(self):
        for case in TEST_CASES:
            expected = "Supportive" if case.mood == "negative" else "Exploratory"
            assert case.mode == expected
