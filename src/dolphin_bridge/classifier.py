"""Turn raw Minecraft server console lines into relay events.

Classification is pure: no clocks, counters or I/O. Lines that cannot be
interpreted produce no event rather than an error.
"""

from __future__ import annotations

import re

from .models import KeywordSet, RelayEvent, RelayEventKind

# "[12:32:45] [Server thread/INFO]: " (vanilla) and
# "[12:32:45] [Async Chat Thread - #0/INFO]: " (Paper and other forks).
_PREFIX_RE = re.compile(
    r"^\[\d{2}:\d{2}:\d{2}\] \[(?:Server thread|Async Chat Thread - #\d+)/[A-Z]+\]: "
)
MIN_PREFIX_LENGTH = len("[00:00:00] [Server thread/INFO]: ")

DEFAULT_DEATH_KEYWORDS: tuple[str, ...] = (
    "shot",
    "pricked",
    "walked into a cactus",
    "roasted",
    "drowned",
    "kinetic",
    "blew up",
    "blown up",
    "killed",
    "hit the ground",
    "fell",
    "doomed",
    "squashed",
    "magic",
    "flames",
    "burned",
    "walked into fire",
    "burnt",
    "bang",
    "lava",
    "lightning",
    "danger",
    "slain",
    "fireballed",
    "stung",
    "starved",
    "suffocated",
    "squished",
    "poked",
    "impaled",
    "didn't want to live",
    "withered",
    "pummeled",
    "died",
)

ADVANCEMENT_PHRASES = (
    "has made the advancement",
    "has completed the challenge",
    "has reached the goal",
)
JOIN_LEAVE_PHRASES = ("joined the game", "left the game")

DRAGON_ALREADY_KILLED = "Found that the dragon has been killed in this world already."

ADVANCEMENT_PREFIX = ":partying_face: "
DEATH_PREFIX = ":skull: "
SERVER_STARTED_MESSAGE = ":white_check_mark: Server has started"
SERVER_STOPPING_MESSAGE = ":x: Server is shutting down"


def default_keywords(custom: list[str] | None = None) -> KeywordSet:
    """Built-in death keywords followed by any caller-supplied ones."""
    return KeywordSet.build(DEFAULT_DEATH_KEYWORDS, custom)


def strip_prefix(raw_line: str) -> str | None:
    """Return the message part of a console line, or ``None`` for unknown formats."""
    if len(raw_line) < MIN_PREFIX_LENGTH or not raw_line.startswith("["):
        return None
    match = _PREFIX_RE.match(raw_line)
    if match is None:
        return None
    return raw_line[match.end() :].strip()


def _is_suppressed(line: str) -> bool:
    # Villager deaths are logged with entity details and would trip the death keywords.
    if line.startswith("Villager") and "died, message:" in line:
        return True
    return line == DRAGON_ALREADY_KILLED


def classify_line(raw_line: str, bot_label: str, keywords: KeywordSet) -> RelayEvent | None:
    """Map one console line to at most one relay event; the first matching rule wins."""
    line = strip_prefix(raw_line)
    if not line:
        return None

    if _is_suppressed(line):
        return None

    if line.startswith("<"):
        speaker, sep, message = line.partition(" ")
        if not sep:
            return None
        return RelayEvent(
            origin_label=speaker.removeprefix("<").removesuffix(">"),
            text=message,
            kind=RelayEventKind.CHAT,
        )

    if any(phrase in line for phrase in JOIN_LEAVE_PHRASES):
        return RelayEvent(origin_label=bot_label, text=line, kind=RelayEventKind.SYSTEM_JOIN_LEAVE)

    if any(phrase in line for phrase in ADVANCEMENT_PHRASES):
        return RelayEvent(
            origin_label=bot_label,
            text=f"{ADVANCEMENT_PREFIX}{line}",
            kind=RelayEventKind.ADVANCEMENT,
        )

    # Plain substring matching: "burnt" also matches a player called "Burnt_Toast".
    if keywords.matches(line):
        return RelayEvent(origin_label=bot_label, text=f"{DEATH_PREFIX}{line}", kind=RelayEventKind.DEATH)

    if line.startswith("Done ("):
        return RelayEvent(origin_label=bot_label, text=SERVER_STARTED_MESSAGE, kind=RelayEventKind.SERVER_START)

    if line.startswith("Stopping the server"):
        return RelayEvent(origin_label=bot_label, text=SERVER_STOPPING_MESSAGE, kind=RelayEventKind.SERVER_STOP)

    return None


class LineClassifier:
    """Binds the bot label and keyword set so callers can classify with one argument."""

    def __init__(self, bot_label: str, keywords: KeywordSet | None = None) -> None:
        self.bot_label = bot_label
        self.keywords = keywords if keywords is not None else default_keywords()

    def classify(self, raw_line: str) -> RelayEvent | None:
        return classify_line(raw_line, self.bot_label, self.keywords)
