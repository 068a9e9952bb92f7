from __future__ import annotations

import pytest

from dolphin_bridge.config import DEFAULT_COMMAND_TEMPLATE
from dolphin_bridge.formatting import (
    build_commands,
    chunk_text,
    escape_quotes,
    render_command,
    sanitize_error_text,
    split_message,
)


def test_chunk_text_250_characters() -> None:
    message = "a" * 100 + "b" * 100 + "c" * 50

    chunks = chunk_text(message)

    assert [len(chunk) for chunk in chunks] == [100, 100, 50]
    assert chunks == ["a" * 100, "b" * 100, "c" * 50]


def test_chunk_text_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        chunk_text("abc", 0)


def test_split_message_splits_lines_and_skips_blank_ones() -> None:
    assert split_message("first\n\n  \nsecond") == ["first", "second"]


def test_split_message_only_breaks_on_line_feeds() -> None:
    assert split_message("one\r\ntwo\r\n\r\n") == ["one", "two"]
    assert split_message("page\x0cbreak") == ["page\x0cbreak"]
    assert split_message("para\u2028graph") == ["para\u2028graph"]


def test_escape_quotes() -> None:
    assert escape_quotes('say "hi"') == 'say \\"hi\\"'


def test_render_command_replaces_every_placeholder() -> None:
    command = render_command("%username%: %message% (%username%)", "Steve", "hello")

    assert command == "Steve: hello (Steve)"


def test_build_commands_with_default_template() -> None:
    commands = build_commands(DEFAULT_COMMAND_TEMPLATE, "Steve", 'she said "hi"')

    assert commands == ['tellraw @a [{"color": "white", "text": "<Steve> she said \\"hi\\""}]']


def test_build_commands_chunks_in_order() -> None:
    message = "a" * 100 + "b" * 100 + "c" * 50

    commands = build_commands("say %message%", "Steve", message)

    assert commands == ["say " + "a" * 100, "say " + "b" * 100, "say " + "c" * 50]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("connect 127.0.0.1:25575: [Errno 111] Connection refused", "[Errno 111] Connection refused"),
        ("connect mc.example.org:25575: timed out", "timed out"),
        ("unable to authenticate: bad password", "unable to authenticate: bad password"),
        ("rcon exchange failed: [Errno 104] Connection reset by peer", "rcon exchange failed: [Errno 104] Connection reset by peer"),
    ],
)
def test_sanitize_error_text(raw: str, expected: str) -> None:
    assert sanitize_error_text(raw) == expected
