"""CLI-side handler wrappers and the console event sender."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from pathlib import Path

from rich.console import Console

from dolphin_bridge.adapters import GameCommandAdapter, LogFollower, MinecraftCommand
from dolphin_bridge.classifier import LineClassifier
from dolphin_bridge.models import RelayEvent, RelayEventKind
from dolphin_bridge.relay import RelayOrchestrator

_KIND_STYLES = {
    RelayEventKind.CHAT: "bold cyan",
    RelayEventKind.SYSTEM_JOIN_LEAVE: "yellow",
    RelayEventKind.ADVANCEMENT: "green",
    RelayEventKind.DEATH: "red",
    RelayEventKind.SERVER_START: "bold green",
    RelayEventKind.SERVER_STOP: "bold red",
}


def format_event(event: RelayEvent) -> str:
    return f"**{event.origin_label}**: {event.text}"


class ConsoleEventSender:
    """Prints relay events to the terminal in the chat-line format."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    async def send(self, event: RelayEvent) -> None:
        self._console.print(format_event(event), style=_KIND_STYLES[event.kind], markup=False, highlight=False)


class CliCommandHandler:
    """Simple sync-friendly facade over the relay orchestrator."""

    def __init__(self, orchestrator: RelayOrchestrator, adapter: GameCommandAdapter) -> None:
        self._orchestrator = orchestrator
        self._adapter = adapter

    def send_command(self, command: str) -> str:
        result = self._adapter.send(MinecraftCommand(command=command))
        return "" if result is None else result

    def relay_chat(self, display_name: str, message: str) -> list[str]:
        return asyncio.run(self._orchestrator.relay_chat(display_name, message))

    @staticmethod
    def classify_file(path: str | Path, classifier: LineClassifier, *, tail: int | None = None) -> list[RelayEvent]:
        """Classify a whole log, or only its last ``tail`` lines."""
        if tail is not None:
            return CliCommandHandler.classify_lines(LogFollower(path).tail(tail), classifier)
        with Path(path).open("r", encoding="utf-8", errors="replace") as handle:
            return CliCommandHandler.classify_lines((line.rstrip("\r\n") for line in handle), classifier)

    @staticmethod
    def classify_lines(lines: Iterable[str], classifier: LineClassifier) -> list[RelayEvent]:
        events: list[RelayEvent] = []
        for line in lines:
            event = classifier.classify(line)
            if event is not None:
                events.append(event)
        return events
