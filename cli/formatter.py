"""Display of chat replies and their context snapshot."""

from typing import TextIO

_CONTEXT_LABELS = (
    ("lastTopic", "topic"),
    ("flightTime", "flight time"),
    ("flightDestination", "destination"),
)


class ResponseFormatter:
    """Writes replies, context and errors to *output*."""

    def __init__(self, output: TextIO, show_context: bool = True):
        self.output = output
        self.show_context = show_context

    def handle_reply(self, reply: dict) -> None:
        if "error" in reply:
            code = reply.get("code", "UNKNOWN")
            self._print(f"\n❌ Error [{code}]: {reply['error']}\n")
            return

        self._print(f"\n{reply.get('message', '')}\n")

        if self.show_context:
            context = reply.get("context") or {}
            parts = [
                f"{label}={context[key]}"
                for key, label in _CONTEXT_LABELS
                if context.get(key)
            ]
            if parts:
                self._print(f"  [{', '.join(parts)}]\n")

    def _print(self, text: str) -> None:
        self.output.write(text)
        self.output.flush()
