"""Dolphin - relay between a Minecraft server console and a chat platform.

- Follows the server console log and classifies lines into relay events
- Sends chat messages back to the server through RCON
"""

__version__ = "0.1.0"
