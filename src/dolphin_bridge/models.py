from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RelayEventKind(str, Enum):
    CHAT = "chat"
    SYSTEM_JOIN_LEAVE = "system_join_leave"
    ADVANCEMENT = "advancement"
    DEATH = "death"
    SERVER_START = "server_start"
    SERVER_STOP = "server_stop"


@dataclass(frozen=True, slots=True)
class RelayEvent:
    """One console event headed for the chat side.

    Events compare by content only; two identical console lines give two equal events.
    """

    origin_label: str
    text: str
    kind: RelayEventKind


@dataclass(frozen=True, slots=True)
class KeywordSet:
    """Ordered, de-duplicated substrings that mark a death message."""

    entries: tuple[str, ...]

    @classmethod
    def build(cls, builtin: tuple[str, ...] | list[str], custom: list[str] | None = None) -> KeywordSet:
        ordered: dict[str, None] = {}
        for word in [*builtin, *(custom or [])]:
            # an empty keyword would match every line
            if word:
                ordered.setdefault(word, None)
        return cls(entries=tuple(ordered))

    def matches(self, line: str) -> bool:
        return any(word in line for word in self.entries)

    def __contains__(self, word: object) -> bool:
        return word in self.entries

    def __len__(self) -> int:
        return len(self.entries)
