"""Blocking RCON client: connect, authenticate, send commands, close.

A connection moves through ``disconnected -> connected -> authenticated``. Only an
authenticated connection may send commands, and ``close`` is terminal. Each unit of
work owns its connection end-to-end; connections are never pooled or shared.
"""

from __future__ import annotations

import logging
import socket

from .errors import AuthenticationError, ProtocolError, RconConnectionError, StateError
from .packet import Packet, PacketType, encode_packet, read_packet

DEFAULT_TIMEOUT_SECONDS = 10.0


class _SocketReader:
    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def read(self, size: int) -> bytes:
        return self._sock.recv(size)


class RconConnection:
    """One TCP socket plus the permanent ``authenticated`` flag.

    Reads have no timeout: a server that never answers blocks the caller until
    :meth:`close` is called from elsewhere, which surfaces as a ``ProtocolError``.
    Calling :meth:`close` more than once is a no-op.
    """

    def __init__(self, sock: socket.socket, *, logger: logging.Logger | None = None) -> None:
        self._sock = sock
        self._reader = _SocketReader(sock)
        self._authenticated = False
        self._closed = False
        self._logger = logger or logging.getLogger("dolphin_bridge.rcon")

    @property
    def authenticated(self) -> bool:
        return self._authenticated

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> RconConnection:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def authenticate(self, password: str) -> None:
        """Send the auth packet; raise :class:`AuthenticationError` on rejection.

        A rejected attempt leaves the connection open and unauthenticated.
        """
        if self._authenticated:
            raise StateError("already authenticated")

        response = self._exchange(PacketType.AUTH, password.encode("utf-8"))
        if response.auth_rejected:
            detail = response.payload.decode("utf-8", errors="replace")
            self._logger.warning("rcon_auth_rejected")
            raise AuthenticationError(f"unable to authenticate: {detail}" if detail else "unable to authenticate")

        self._authenticated = True
        self._logger.debug("rcon_authenticated")

    def send_command(self, command: str) -> str:
        """Run one console command and return the server's reply text."""
        if not self._authenticated:
            raise StateError("cannot send command when not authenticated")

        response = self._exchange(PacketType.COMMAND, command.encode("utf-8"))
        if response.auth_rejected:
            raise AuthenticationError("unable to send command: bad auth")

        text = response.payload.decode("utf-8", errors="replace")
        self._logger.debug("rcon_command_sent", extra={"command": command, "response": text})
        return text

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # peer already gone
            pass
        self._sock.close()
        self._logger.debug("rcon_closed")

    def _exchange(self, packet_type: PacketType, payload: bytes) -> Packet:
        if self._closed:
            raise StateError("connection is closed")

        # Size check happens here, before anything is written.
        data = encode_packet(packet_type, payload)
        try:
            self._sock.sendall(data)
            return read_packet(self._reader)
        except OSError as exc:
            raise ProtocolError(f"rcon exchange failed: {exc}") from exc


def connect(
    host: str,
    port: int,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    *,
    logger: logging.Logger | None = None,
) -> RconConnection:
    """Open a TCP connection within ``timeout`` seconds; does not authenticate."""
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as exc:
        raise RconConnectionError(f"connect {host}:{port}: {exc}") from exc

    # Only the dial is bounded; reads block until the server answers.
    sock.settimeout(None)
    return RconConnection(sock, logger=logger)
