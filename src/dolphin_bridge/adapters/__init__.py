"""Game-side adapters: console commands over RCON and console log following."""

from .game_command import GameCommandAdapter, MinecraftCommand
from .live_minecraft import EchoGameCommandAdapter, RconGameCommandAdapter
from .log_follower import LogFollower

__all__ = [
    "EchoGameCommandAdapter",
    "GameCommandAdapter",
    "LogFollower",
    "MinecraftCommand",
    "RconGameCommandAdapter",
]
