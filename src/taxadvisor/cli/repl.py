"""Interactive chat loop and one-shot calculation commands."""

import logging
import sys
from typing import TextIO

from taxadvisor.core.tax import format_calculation_result

from .client import AdvisorAPIClient, APIError
from .config import CLIConfig

logger = logging.getLogger(__name__)

EXIT_WORDS = ("exit", "quit", "q")


class AdvisorCLI:
    """Interactive CLI for the tax advisor chat."""

    def __init__(
        self,
        client: AdvisorAPIClient,
        input_stream: TextIO = sys.stdin,
        output_stream: TextIO = sys.stdout,
    ):
        self.client = client
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.session_id: str | None = None

    async def run(self) -> None:
        """Run the interactive loop until EOF or an exit word."""
        try:
            self._print_welcome()
            while True:
                try:
                    message = self._get_user_input()
                except EOFError:
                    self._print("\nGoodbye!\n")
                    break
                if not message.strip():
                    continue
                if message.strip().lower() in EXIT_WORDS:
                    self._print("Goodbye!\n")
                    break
                await self.send(message)
        finally:
            await self.client.close()

    async def send(self, message: str) -> None:
        """Send one message and print the assistant's reply."""
        try:
            reply = await self.client.chat(message, self.session_id)
        except APIError as e:
            self._print(f"\nError ({e.code}): {e}\n\n")
            return
        self.session_id = reply.get("sessionId", self.session_id)
        self._print(f"\n{reply['message']['content']}\n\n")

    async def calculate(self, kind: str, data: dict[str, str]) -> int:
        """Run one calculation and print it; returns a process exit code."""
        try:
            result = await self.client.calculate(kind, data)
        except APIError as e:
            self._print(f"Error ({e.code}): {e}\n")
            return 1
        finally:
            await self.client.close()
        self._print(format_calculation_result(kind, result) + "\n")
        return 0

    def _get_user_input(self) -> str:
        self._print("> ")
        line = self.input_stream.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n\r")

    def _print_welcome(self) -> None:
        self._print("Tax Advisor CLI\n")
        self._print(f"Connected to: {self.client.config.chat_url}\n")
        self._print("Type your question and press Enter. Type 'exit' to quit.\n\n")

    def _print(self, text: str) -> None:
        self.output_stream.write(text)
        self.output_stream.flush()
