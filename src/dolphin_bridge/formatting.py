"""Helpers for turning inbound chat messages into console commands."""

from __future__ import annotations

import re

DEFAULT_CHUNK_SIZE = 100
USERNAME_PLACEHOLDER = "%username%"
MESSAGE_PLACEHOLDER = "%message%"

# "connect 127.0.0.1:25575: [Errno 111] Connection refused" -> "[Errno 111] Connection refused"
_ADDRESS_PREFIX_RE = re.compile(r"^(?:[a-z]+ )*\S+:\d+:\s*")


def escape_quotes(text: str) -> str:
    return text.replace('"', '\\"')


def chunk_text(text: str, limit: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Split ``text`` into consecutive pieces of at most ``limit`` characters."""
    if limit < 1:
        raise ValueError("limit must be positive")
    return [text[start : start + limit] for start in range(0, len(text), limit)]


def split_message(text: str, limit: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Split on line feeds, drop blank lines, then chunk each line in order.

    A carriage return before the line feed is dropped. Other separators such
    as form feeds or U+2028 stay inside the line.
    """
    chunks: list[str] = []
    for line in text.split("\n"):
        line = line.removesuffix("\r")
        if line.strip():
            chunks.extend(chunk_text(line, limit))
    return chunks


def render_command(template: str, username: str, message: str) -> str:
    return template.replace(USERNAME_PLACEHOLDER, username).replace(MESSAGE_PLACEHOLDER, message)


def build_commands(template: str, username: str, message: str, limit: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """One rendered console command per message chunk, in reading order."""
    return [
        render_command(template, username, escape_quotes(chunk))
        for chunk in split_message(message, limit)
    ]


def sanitize_error_text(text: str) -> str:
    """Remove leading ``verb host:port:`` segments before showing transport errors to users."""
    return _ADDRESS_PREFIX_RE.sub("", text, count=1).strip() or text
