"""Follow a growing Minecraft console log, surviving log rotation."""

from __future__ import annotations

import asyncio
import logging
import os
from collections import deque
from collections.abc import AsyncIterator
from pathlib import Path
from typing import BinaryIO

DEFAULT_POLL_INTERVAL_SECONDS = 0.25


class LogFollower:
    """Yield lines appended to ``path`` after :meth:`open`, in write order.

    Reading starts at the current end of the file. When the file is replaced
    (new inode) or truncated, it is reopened from the beginning. Lines without
    a trailing newline are held back until they are completed, or until the
    file is rotated away, in which case they are emitted unterminated.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        encoding: str = "utf-8",
        logger: logging.Logger | None = None,
    ) -> None:
        self._path = Path(path)
        self._poll_interval_seconds = poll_interval_seconds
        self._encoding = encoding
        self._logger = logger or logging.getLogger("dolphin_bridge.follower")

        self._handle: BinaryIO | None = None
        self._inode: int | None = None
        self._partial = b""
        self._opened = False
        self._closed = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self) -> None:
        """Start following at the current end of the file."""
        if self._opened or self._closed:
            return
        self._opened = True
        self._reopen(seek_end=True)

    def close(self) -> None:
        """Stop following; a pending :meth:`readline` returns ``None``."""
        self._closed = True
        self._release()

    async def readline(self) -> str | None:
        """Wait for the next complete line, without its terminator."""
        self.open()
        while not self._closed:
            line = self._read_available()
            if line is None:
                # an unterminated last line of a rotated file is emitted as is
                line = self._check_rotation()
            if line is not None:
                return line
            await asyncio.sleep(self._poll_interval_seconds)
        return None

    async def lines(self) -> AsyncIterator[str]:
        while True:
            line = await self.readline()
            if line is None:
                return
            yield line

    def tail(self, lines: int = 50) -> list[str]:
        """Return up to the last ``lines`` lines currently in the file."""
        try:
            with self._path.open("r", encoding=self._encoding, errors="replace") as handle:
                return [line.rstrip("\r\n") for line in deque(handle, maxlen=lines)]
        except FileNotFoundError:
            return []

    def _read_available(self) -> str | None:
        if self._handle is None:
            return None
        chunk = self._handle.readline()
        if not chunk:
            return None
        if not chunk.endswith(b"\n"):
            self._partial += chunk
            return None
        data, self._partial = self._partial + chunk, b""
        return data.rstrip(b"\r\n").decode(self._encoding, errors="replace")

    def _check_rotation(self) -> str | None:
        """Reopen a replaced or truncated file; return any line cut short by it."""
        try:
            stat = os.stat(self._path)
        except FileNotFoundError:
            if self._handle is None:
                return None
            self._logger.info("log_file_missing", extra={"path": str(self._path)})
            flushed = self._take_partial()
            self._release()
            return flushed

        if self._handle is None:
            # The file appeared (again) while we were waiting for it.
            self._reopen(seek_end=False)
            return None

        rotated = self._inode is not None and stat.st_ino != self._inode
        truncated = self._handle.tell() > stat.st_size
        if rotated or truncated:
            self._logger.info(
                "log_file_rotated",
                extra={"path": str(self._path), "rotated": rotated, "truncated": truncated},
            )
            flushed = self._take_partial()
            self._release()
            self._reopen(seek_end=False)
            return flushed
        return None

    def _take_partial(self) -> str | None:
        if not self._partial:
            return None
        data, self._partial = self._partial, b""
        return data.rstrip(b"\r").decode(self._encoding, errors="replace")

    def _reopen(self, *, seek_end: bool) -> None:
        try:
            handle = self._path.open("rb")
        except FileNotFoundError:
            self._logger.warning("log_file_not_found", extra={"path": str(self._path)})
            return
        if seek_end:
            handle.seek(0, os.SEEK_END)
        self._handle = handle
        self._inode = os.fstat(handle.fileno()).st_ino
        self._partial = b""

    def _release(self) -> None:
        if self._handle is not None:
            self._handle.close()
        self._handle = None
        self._inode = None
        self._partial = b""
