"""API client for the Bridge Me chat endpoint with SSE stream parsing."""

import json
import logging
from typing import AsyncIterator

import httpx

from .config import CLIConfig

logger = logging.getLogger(__name__)

SSE_DATA_PREFIX = "data: "


class ChatAPIClient:
    """Client for interacting with the Bridge Me chat API."""

    def __init__(
        self,
        config: CLIConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.client = httpx.AsyncClient(timeout=120.0, transport=transport)

    async def chat(
        self,
        message: str,
        conversation_id: str,
        history: list[dict] | None = None,
    ) -> AsyncIterator[dict]:
        """Send a chat request and stream events.

        Non-stream error responses and transport failures are turned
        into ``{"type": "error", ...}`` events so callers handle a single
        event shape.
        """
        payload = {
            "message": message,
            "conversationId": conversation_id,
            "history": history or [],
        }
        logger.debug("POST %s (conversation %s)", self.config.chat_url, conversation_id)

        try:
            async with self.client.stream(
                "POST",
                self.config.chat_url,
                json=payload,
                headers={"Accept": "text/event-stream"},
            ) as response:
                logger.debug("Response status: %s", response.status_code)

                if response.status_code != 200:
                    body = await response.aread()
                    yield {
                        "type": "error",
                        "message": _error_message(response.status_code, body),
                    }
                    return

                # SSE format: "data: {...}\n\n"
                buffer = ""
                async for chunk in response.aiter_text():
                    buffer += chunk
                    while "\n\n" in buffer:
                        event_block, buffer = buffer.split("\n\n", 1)
                        for event in _parse_event_block(event_block):
                            yield event

        except httpx.TimeoutException:
            yield {"type": "error", "message": "Request timed out."}
        except httpx.ConnectError as e:
            yield {"type": "error", "message": f"Connection error: {e}"}

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()


def _parse_event_block(event_block: str) -> list[dict]:
    events = []
    for line in event_block.split("\n"):
        line = line.strip()
        if not line.startswith(SSE_DATA_PREFIX):
            continue
        data_str = line[len(SSE_DATA_PREFIX) :]
        try:
            events.append(json.loads(data_str))
        except json.JSONDecodeError:
            logger.warning("Failed to parse SSE data: %s", data_str)
    return events


def _error_message(status_code: int, body: bytes) -> str:
    try:
        detail = json.loads(body).get("error")
    except (ValueError, AttributeError):
        detail = None
    return f"HTTP {status_code}: {detail or body.decode(errors='replace')}"
