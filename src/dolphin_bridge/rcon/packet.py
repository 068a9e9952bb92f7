"""RCON wire format encoding and decoding.

Wire format (little-endian): ``[size:i32][request_id:i32][type:i32][payload][0x00 0x00]``.
``size`` counts everything after itself, so it equals ``len(payload) + 10``.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO

from .errors import PacketTooLargeError, ProtocolError


class PacketType(IntEnum):
    """Request packet types sent by the client."""

    COMMAND = 2
    AUTH = 3


HEADER = struct.Struct("<iii")
HEADER_SIZE = HEADER.size
# size field covers request_id + type + payload + 2 null bytes
ENVELOPE_SIZE = 10
MAX_PACKET_SIZE = 1460
MAX_PAYLOAD_SIZE = MAX_PACKET_SIZE - ENVELOPE_SIZE - 1
BAD_LOGIN_ID = -1
# largest single read; a bogus size field must not size the buffer
_READ_CHUNK = 4096
PADDING = b"\x00\x00"


@dataclass(frozen=True, slots=True)
class PacketHeader:
    size: int
    request_id: int
    packet_type: int

    @property
    def body_length(self) -> int:
        return self.size - 8


@dataclass(frozen=True, slots=True)
class Packet:
    """A decoded response packet."""

    header: PacketHeader
    payload: bytes

    @property
    def request_id(self) -> int:
        return self.header.request_id

    @property
    def auth_rejected(self) -> bool:
        return self.header.request_id == BAD_LOGIN_ID


def encode_packet(packet_type: PacketType, payload: bytes) -> bytes:
    """Encode a client request; ``request_id`` is always 0 on the way out."""
    size = len(payload) + ENVELOPE_SIZE
    if size >= MAX_PACKET_SIZE:
        raise PacketTooLargeError(
            f"packet size {size} exceeds the {MAX_PACKET_SIZE - 1} byte limit"
        )
    return HEADER.pack(size, 0, int(packet_type)) + payload + PADDING


def decode_header(data: bytes) -> PacketHeader:
    if len(data) != HEADER_SIZE:
        raise ProtocolError(f"expected {HEADER_SIZE} header bytes, got {len(data)}")
    size, request_id, packet_type = HEADER.unpack(data)
    if size - 8 < len(PADDING):
        raise ProtocolError(f"invalid packet size {size}")
    return PacketHeader(size=size, request_id=request_id, packet_type=packet_type)


def decode_packet(data: bytes) -> Packet:
    """Decode one complete packet held in ``data``."""
    header = decode_header(data[:HEADER_SIZE])
    body = data[HEADER_SIZE:]
    if len(body) < header.body_length:
        raise ProtocolError(
            f"truncated packet body: expected {header.body_length} bytes, got {len(body)}"
        )
    return Packet(header=header, payload=body[: header.body_length - len(PADDING)])


def read_exact(stream: BinaryIO, length: int) -> bytes:
    """Read exactly ``length`` bytes or fail with :class:`ProtocolError` on EOF."""
    chunks: list[bytes] = []
    remaining = length
    while remaining > 0:
        chunk = stream.read(min(remaining, _READ_CHUNK))
        if not chunk:
            received = length - remaining
            raise ProtocolError(f"connection closed after {received} of {length} bytes")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_packet(stream: BinaryIO) -> Packet:
    """Read one header and its body; responses split across packets are not reassembled."""
    header = decode_header(read_exact(stream, HEADER_SIZE))
    body = read_exact(stream, header.body_length)
    return Packet(header=header, payload=body[: -len(PADDING)])
