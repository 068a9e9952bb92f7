from __future__ import annotations

import asyncio
from pathlib import Path

from dolphin_bridge.adapters.log_follower import LogFollower


def _append(path: Path, text: str) -> None:
    with path.open("a", encoding="utf-8") as handle:
        handle.write(text)


def test_follower_starts_at_end_of_file(tmp_path: Path) -> None:
    log_path = tmp_path / "latest.log"
    log_path.write_text("old line\n", encoding="utf-8")

    async def _run() -> list[str]:
        follower = LogFollower(log_path, poll_interval_seconds=0.01)
        follower.open()
        _append(log_path, "first\nsecond\n")
        lines = [
            await asyncio.wait_for(follower.readline(), timeout=1),
            await asyncio.wait_for(follower.readline(), timeout=1),
        ]
        follower.close()
        return lines

    assert asyncio.run(_run()) == ["first", "second"]


def test_follower_waits_for_complete_lines(tmp_path: Path) -> None:
    log_path = tmp_path / "latest.log"
    log_path.write_text("", encoding="utf-8")

    async def _run() -> str | None:
        follower = LogFollower(log_path, poll_interval_seconds=0.01)
        follower.open()
        _append(log_path, "half a ")
        pending = asyncio.create_task(follower.readline())
        await asyncio.sleep(0.05)
        assert not pending.done()
        _append(log_path, "line\r\n")
        line = await asyncio.wait_for(pending, timeout=1)
        follower.close()
        return line

    assert asyncio.run(_run()) == "half a line"


def test_follower_reopens_rotated_file(tmp_path: Path) -> None:
    log_path = tmp_path / "latest.log"
    log_path.write_text("", encoding="utf-8")

    async def _run() -> list[str]:
        follower = LogFollower(log_path, poll_interval_seconds=0.01)
        follower.open()
        _append(log_path, "before rotation\n")
        first = await asyncio.wait_for(follower.readline(), timeout=1)

        log_path.rename(tmp_path / "2024-01-01-1.log")
        log_path.write_text("after rotation\n", encoding="utf-8")
        second = await asyncio.wait_for(follower.readline(), timeout=1)
        follower.close()
        return [first, second]

    assert asyncio.run(_run()) == ["before rotation", "after rotation"]


def test_rotation_flushes_unterminated_line(tmp_path: Path) -> None:
    log_path = tmp_path / "latest.log"
    log_path.write_text("", encoding="utf-8")

    async def _run() -> list[str]:
        follower = LogFollower(log_path, poll_interval_seconds=0.01)
        follower.open()
        _append(log_path, "tail without newline")
        pending = asyncio.create_task(follower.readline())
        await asyncio.sleep(0.05)
        assert not pending.done()

        log_path.rename(tmp_path / "2024-01-01-1.log")
        log_path.write_text("fresh line\n", encoding="utf-8")
        lines = [
            await asyncio.wait_for(pending, timeout=1),
            await asyncio.wait_for(follower.readline(), timeout=1),
        ]
        follower.close()
        return lines

    assert asyncio.run(_run()) == ["tail without newline", "fresh line"]


def test_close_ends_iteration(tmp_path: Path) -> None:
    log_path = tmp_path / "latest.log"
    log_path.write_text("", encoding="utf-8")

    async def _run() -> list[str]:
        follower = LogFollower(log_path, poll_interval_seconds=0.01)
        follower.open()
        _append(log_path, "only line\n")
        collected: list[str] = []

        async def _collect() -> None:
            async for line in follower.lines():
                collected.append(line)

        task = asyncio.create_task(_collect())
        await asyncio.sleep(0.05)
        follower.close()
        await asyncio.wait_for(task, timeout=1)
        return collected

    assert asyncio.run(_run()) == ["only line"]


def test_follower_waits_for_missing_file(tmp_path: Path) -> None:
    log_path = tmp_path / "latest.log"

    async def _run() -> str | None:
        follower = LogFollower(log_path, poll_interval_seconds=0.01)
        follower.open()
        log_path.write_text("server booting\n", encoding="utf-8")
        line = await asyncio.wait_for(follower.readline(), timeout=1)
        follower.close()
        return line

    assert asyncio.run(_run()) == "server booting"


def test_tail(tmp_path: Path) -> None:
    log_path = tmp_path / "latest.log"
    log_path.write_text("a\nb\nc\n", encoding="utf-8")

    assert LogFollower(log_path).tail(lines=2) == ["b", "c"]
    assert LogFollower(tmp_path / "missing.log").tail() == []
