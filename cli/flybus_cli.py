"""Interactive chat session against a running backend."""

import logging
import sys
from typing import TextIO

from .client import ChatAPIClient
from .config import CLIConfig
from .formatter import ResponseFormatter

logger = logging.getLogger(__name__)

EXIT_COMMANDS = frozenset({"exit", "quit", "q"})
NEW_SESSION_COMMAND = "/new"
SHOW_SESSION_COMMAND = "/session"

BANNER = """Flybus chat
Server: {url}
Commands: {new} starts a fresh session, {show} prints the current one,
'exit' leaves.

"""


class FlybusCLI:
    """Line-based REPL that keeps one server session across turns."""

    def __init__(
        self,
        config: CLIConfig,
        input_stream: TextIO = sys.stdin,
        output_stream: TextIO = sys.stdout,
        show_context: bool = True,
        client: ChatAPIClient | None = None,
    ):
        self.config = config
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.client = client or ChatAPIClient(config)
        self.formatter = ResponseFormatter(output_stream, show_context)
        self.session_id: str | None = None

    async def run(self) -> None:
        self._write(
            BANNER.format(
                url=self.config.chat_url,
                new=NEW_SESSION_COMMAND,
                show=SHOW_SESSION_COMMAND,
            )
        )
        try:
            while (line := self._prompt()) is not None:
                if not await self._dispatch(line.strip()):
                    break
            else:
                self._write("\n")
            self._write("Goodbye!\n")
        finally:
            await self.client.close()

    async def _dispatch(self, text: str) -> bool:
        """Handle one input line; ``False`` ends the loop."""
        if not text:
            return True
        command = text.lower()
        if command in EXIT_COMMANDS:
            return False
        if command == NEW_SESSION_COMMAND:
            self.session_id = None
            self._write("Started a new session.\n\n")
        elif command == SHOW_SESSION_COMMAND:
            self._write(f"Session: {self.session_id or '(none yet)'}\n\n")
        else:
            await self._send(text)
        return True

    async def _send(self, message: str) -> None:
        reply = await self.client.chat(message, self.session_id)
        if session_id := reply.get("sessionId"):
            self.session_id = session_id
        logger.debug("session=%s reply=%s", self.session_id, reply)
        self.formatter.handle_reply(reply)
        self._write("\n")

    def _prompt(self) -> str | None:
        self._write("> ")
        try:
            line = self.input_stream.readline()
        except KeyboardInterrupt:
            return None
        return line.rstrip("\r\n") if line else None

    def _write(self, text: str) -> None:
        self.output_stream.write(text)
        self.output_stream.flush()


async def main(
    host: str = "localhost",
    port: int = 8080,
    api_path: str = "/chat",
    api_key: str = "",
    debug: bool = False,
    show_context: bool = True,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    config = CLIConfig(host=host, port=port, api_path=api_path, api_key=api_key)
    await FlybusCLI(config, show_context=show_context).run()
