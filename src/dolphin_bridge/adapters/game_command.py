"""Boundary for game command transport integrations."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(slots=True)
class MinecraftCommand:
    """Console command payload directed at the running server."""

    command: str


class GameCommandAdapter(Protocol):
    """Interface to run console commands on a Minecraft server."""

    def send(self, payload: MinecraftCommand) -> str | None:
        """Dispatch a command payload and return the server's reply."""
