"""Minecraft RCON protocol client."""

from .client import DEFAULT_TIMEOUT_SECONDS, RconConnection, connect
from .errors import (
    AuthenticationError,
    PacketTooLargeError,
    ProtocolError,
    RconConnectionError,
    RconError,
    StateError,
)
from .packet import MAX_PACKET_SIZE, MAX_PAYLOAD_SIZE, Packet, PacketType, decode_packet, encode_packet

__all__ = [
    "AuthenticationError",
    "DEFAULT_TIMEOUT_SECONDS",
    "MAX_PACKET_SIZE",
    "MAX_PAYLOAD_SIZE",
    "Packet",
    "PacketTooLargeError",
    "PacketType",
    "ProtocolError",
    "RconConnection",
    "RconConnectionError",
    "RconError",
    "StateError",
    "connect",
    "decode_packet",
    "encode_packet",
]
