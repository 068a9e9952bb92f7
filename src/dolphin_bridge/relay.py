"""Bidirectional relay between the server console and an external chat sender.

Console direction: one producer task follows the log, classifies each line and
queues the resulting events in console order. The queue is unbounded unless
``queue_maxsize`` is set, so a stalled consumer makes events pile up in memory;
``pending_events`` exposes the backlog.

Chat direction: every message is rendered into one or more console commands and
each command runs in its own RCON session in a worker thread. Separate messages
are not serialized against each other.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Protocol

from dolphin_bridge.adapters import GameCommandAdapter, MinecraftCommand
from dolphin_bridge.classifier import classify_line, default_keywords
from dolphin_bridge.formatting import DEFAULT_CHUNK_SIZE, build_commands, sanitize_error_text
from dolphin_bridge.models import KeywordSet, RelayEvent


class LineSource(Protocol):
    """Follow subscription over console output."""

    def lines(self) -> AsyncIterator[str]:
        """Yield console lines in write order."""

    def close(self) -> None:
        """Stop following and release file handles."""


class EventSender(Protocol):
    """Delivers relay events to the chat platform."""

    async def send(self, event: RelayEvent) -> None:
        """Deliver one event."""


class OutboundRelayError(RuntimeError):
    """A chat message could not be delivered to the server."""

    def __init__(self, user_message: str, *, sent_chunks: int, total_chunks: int) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.sent_chunks = sent_chunks
        self.total_chunks = total_chunks


class RelayOrchestrator:
    """Owns the log subscription, the event queue and outbound chat sessions."""

    def __init__(
        self,
        follower: LineSource,
        adapter: GameCommandAdapter,
        *,
        bot_label: str,
        command_template: str,
        keywords: KeywordSet | None = None,
        queue_maxsize: int = 0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        logger: logging.Logger | None = None,
    ) -> None:
        self._follower = follower
        self._adapter = adapter
        self._bot_label = bot_label
        self._command_template = command_template
        self._keywords = keywords if keywords is not None else default_keywords()
        self._chunk_size = chunk_size
        self._logger = logger or logging.getLogger("dolphin_bridge.relay")

        self._queue: asyncio.Queue[RelayEvent] = asyncio.Queue(maxsize=queue_maxsize)
        self._producer_task: asyncio.Task[None] | None = None

    @property
    def pending_events(self) -> int:
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return self._producer_task is not None and not self._producer_task.done()

    async def start(self) -> None:
        """Start the log-following producer once for this orchestrator."""
        if self.running:
            return

        self._producer_task = asyncio.create_task(self._produce(), name="relay-log-follower")
        self._logger.info("relay_started", extra={"queue_maxsize": self._queue.maxsize})

    async def stop(self) -> None:
        """Cancel the producer and release the log subscription."""
        self._follower.close()
        if not self._producer_task:
            return

        self._producer_task.cancel()
        try:
            await self._producer_task
        except asyncio.CancelledError:
            pass
        finally:
            self._producer_task = None

        self._logger.info("relay_stopped", extra={"pending_events": self._queue.qsize()})

    async def next_event(self) -> RelayEvent:
        return await self._queue.get()

    async def events(self) -> AsyncIterator[RelayEvent]:
        while True:
            yield await self.next_event()

    async def pump(self, sender: EventSender) -> None:
        """Drain events into ``sender`` until cancelled."""
        async for event in self.events():
            try:
                await sender.send(event)
            except Exception:  # noqa: BLE001 - one bad delivery must not stop the relay.
                self._logger.exception(
                    "relay_event_send_failed",
                    extra={"kind": event.kind.value, "origin": event.origin_label},
                )

    def build_commands(self, display_name: str, message: str) -> list[str]:
        return build_commands(self._command_template, display_name, message, self._chunk_size)

    async def relay_chat(self, display_name: str, message: str) -> list[str]:
        """Send one chat message to the server and return the per-chunk replies.

        Chunks go out in order; the first failure stops the rest and raises
        :class:`OutboundRelayError` with text that is safe to show the sender.
        """
        commands = self.build_commands(display_name, message)
        replies: list[str] = []
        for index, command in enumerate(commands):
            try:
                reply = await asyncio.to_thread(self._adapter.send, MinecraftCommand(command=command))
            except Exception as exc:
                self._logger.error(
                    "relay_chat_failed",
                    extra={"sender": display_name, "chunk": index, "error": f"{type(exc).__name__}: {exc}"},
                )
                raise OutboundRelayError(
                    sanitize_error_text(str(exc)) or type(exc).__name__,
                    sent_chunks=index,
                    total_chunks=len(commands),
                ) from exc
            replies.append("" if reply is None else str(reply))

        self._logger.debug("relay_chat_sent", extra={"sender": display_name, "chunks": len(commands)})
        return replies

    async def _produce(self) -> None:
        async for line in self._follower.lines():
            event = classify_line(line, self._bot_label, self._keywords)
            if event is None:
                continue
            await self._queue.put(event)
            self._logger.debug(
                "relay_event_queued",
                extra={"kind": event.kind.value, "origin": event.origin_label, "pending": self._queue.qsize()},
            )
        self._logger.info("relay_follow_ended")
