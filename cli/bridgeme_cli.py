"""Interactive terminal client for the Bridge Me chat API."""

import logging
import sys
import uuid
from typing import TextIO

from .cases import EDGE_CASES, TEST_CASES
from .client import ChatAPIClient
from .config import CLIConfig
from .formatter import ResponseFormatter, format_badge

logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"exit", "quit", "q"}
RESET_COMMANDS = {"/new", "/reset"}


class BridgeMeCLI:
    """Interactive CLI keeping one conversation id and a local transcript."""

    def __init__(
        self,
        config: CLIConfig,
        client: ChatAPIClient | None = None,
        output: TextIO = sys.stdout,
    ):
        self.config = config
        self.client = client or ChatAPIClient(config)
        self.output = output
        self.conversation_id = str(uuid.uuid4())
        self.messages: list[dict] = []

    def new_conversation(self) -> None:
        """Start over with a fresh conversation id and an empty transcript."""
        self.conversation_id = str(uuid.uuid4())
        self.messages = []

    async def send(self, message: str) -> ResponseFormatter:
        """Send one message, render the streamed reply and record the turn."""
        formatter = ResponseFormatter(self.output)
        history = self.messages[-self.config.history_window :]

        async for event in self.client.chat(message, self.conversation_id, history):
            formatter.handle_event(event)
        formatter.finish_response()

        if formatter.error is None or formatter.reply:
            self.messages.append({"role": "user", "content": message})
            self.messages.append({"role": "assistant", "content": formatter.reply})
        return formatter

    async def run(self):
        """Run the interactive CLI loop."""
        self._print_welcome()

        try:
            while True:
                try:
                    user_input = input("\n💬 You: ").strip()
                except EOFError:
                    break

                if not user_input:
                    continue
                if user_input.lower() in EXIT_COMMANDS:
                    break
                if user_input.lower() in RESET_COMMANDS:
                    self.new_conversation()
                    self.output.write(f"🔄 New conversation {self.conversation_id}\n")
                    continue

                self.output.write("🤖 Assistant: ")
                self.output.flush()
                await self.send(user_input)
        finally:
            await self.client.close()
            self.output.write("\n👋 Goodbye!\n")

    async def run_cases(self):
        """Send every sample message in its own conversation and compare moods."""
        self.output.write("=== Test cases (expected vs detected) ===\n")
        matched = 0
        try:
            for case in TEST_CASES:
                meta = await self._detect(case.message)
                detected = meta.get("mood") if meta else None
                ok = detected == case.mood
                matched += ok
                self.output.write(
                    f"\n{'✅' if ok else '❌'} {case.message}\n"
                    f"   expected: {case.mood} / {case.mode} ({case.why})\n"
                    f"   detected: {format_badge(meta) if meta else 'no result'}\n"
                )
            self.output.write(f"\nMatched {matched}/{len(TEST_CASES)} moods.\n")

            self.output.write("\n=== Edge cases ===\n")
            for edge in EDGE_CASES:
                meta = await self._detect(edge.message)
                self.output.write(
                    f"\n⚠️  {edge.message}\n"
                    f"   why hard: {edge.why_hard}\n"
                    f"   handling: {edge.handling}\n"
                    f"   detected: {format_badge(meta) if meta else 'no result'}\n"
                )
        finally:
            await self.client.close()

    async def _detect(self, message: str) -> dict | None:
        meta = None
        async for event in self.client.chat(message, str(uuid.uuid4()), []):
            if event.get("type") == "meta":
                meta = event
            elif event.get("type") == "error":
                logger.warning("Case %r failed: %s", message, event.get("message"))
        return meta

    def _print_welcome(self):
        self.output.write(
            "=" * 60 + "\n"
            "🌉 Bridge Me Chat CLI\n"
            + "=" * 60
            + "\n"
            f"Connected to: {self.config.chat_url}\n"
            f"Conversation: {self.conversation_id}\n"
            "Type '/new' for a fresh conversation, 'exit' or 'quit' to end.\n"
            + "=" * 60
            + "\n"
        )
        self.output.flush()


async def main(
    host: str = "localhost",
    port: int = 8000,
    api_path: str = "/api/chat",
    debug: bool = False,
    cases: bool = False,
):
    """Main entry point for the CLI."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = CLIConfig(host=host, port=port, api_path=api_path)
    cli = BridgeMeCLI(config)
    if cases:
        await cli.run_cases()
    else:
        await cli.run()
