"""Live Minecraft command adapters.

Every ``send`` opens its own RCON session (connect, authenticate, command, close)
so concurrent callers never share a socket. Throughput is not a concern at chat
message volumes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from dolphin_bridge.adapters.game_command import GameCommandAdapter, MinecraftCommand
from dolphin_bridge.rcon import DEFAULT_TIMEOUT_SECONDS, RconConnection, connect

Connector = Callable[..., RconConnection]


@dataclass(slots=True)
class RconGameCommandAdapter(GameCommandAdapter):
    """Adapter that runs each command in a fresh RCON session."""

    host: str
    port: int
    password: str = field(repr=False)
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    connector: Connector = connect
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("dolphin_bridge.rcon"))

    def send(self, payload: MinecraftCommand) -> str:
        with self.connector(self.host, self.port, self.timeout_seconds, logger=self.logger) as conn:
            conn.authenticate(self.password)
            return conn.send_command(payload.command)


class EchoGameCommandAdapter:
    """Fallback adapter used for dry runs and tests."""

    def send(self, payload: MinecraftCommand) -> str:
        return f"executed: {payload.command}"
