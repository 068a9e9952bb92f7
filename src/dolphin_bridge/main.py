"""CLI startup entrypoint for the Dolphin bridge."""

from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path

import typer
from rich import print

from dolphin_bridge.adapters import EchoGameCommandAdapter, GameCommandAdapter, LogFollower, RconGameCommandAdapter
from dolphin_bridge.classifier import LineClassifier, default_keywords
from dolphin_bridge.cli import CliCommandHandler, ConsoleEventSender, format_event
from dolphin_bridge.config import ConfigError, Settings, load_settings
from dolphin_bridge.formatting import sanitize_error_text
from dolphin_bridge.rcon import RconError
from dolphin_bridge.relay import OutboundRelayError, RelayOrchestrator
from dolphin_bridge.telemetry import configure_logging

app = typer.Typer(help="Relay between a Minecraft server console and chat")


def _load(ctx: typer.Context) -> Settings:
    return ctx.obj["settings"]


def _build_game_adapter(settings: Settings, *, dry_run: bool = False) -> GameCommandAdapter:
    if dry_run:
        return EchoGameCommandAdapter()
    return RconGameCommandAdapter(
        host=settings.rcon_host,
        port=settings.rcon_port,
        password=settings.rcon_password.get_secret_value(),
        timeout_seconds=settings.rcon_timeout_seconds,
    )


def _build_follower(settings: Settings) -> LogFollower:
    return LogFollower(settings.log_file_path, poll_interval_seconds=settings.follow_poll_interval_seconds)


def _build_orchestrator(settings: Settings, adapter: GameCommandAdapter) -> RelayOrchestrator:
    return RelayOrchestrator(
        _build_follower(settings),
        adapter,
        bot_label=settings.bot_label,
        command_template=settings.command_template,
        keywords=default_keywords(settings.custom_death_keywords),
        queue_maxsize=settings.event_queue_maxsize,
        chunk_size=settings.chunk_size,
    )


def _build_handler(settings: Settings, *, dry_run: bool = False) -> CliCommandHandler:
    adapter = _build_game_adapter(settings, dry_run=dry_run)
    return CliCommandHandler(_build_orchestrator(settings, adapter), adapter)


@app.callback()
def main(
    ctx: typer.Context,
    config: Path = typer.Option(None, "--config", "-c", help="Path to a TOML configuration file"),
    debug: bool = typer.Option(False, "--debug", help="Print additional debug lines"),
) -> None:
    try:
        settings = load_settings(config)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc

    configure_logging("DEBUG" if debug else settings.log_level)
    ctx.obj = {"settings": settings}


@app.command("show-config")
def show_config(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    print(_load(ctx).model_dump(mode="json"))


@app.command()
def classify(
    ctx: typer.Context,
    log_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Console log to classify"),
    tail: int | None = typer.Option(None, "--tail", "-n", min=1, help="Only classify the last N lines"),
) -> None:
    """Classify the lines of a console log and print the resulting events."""
    settings = _load(ctx)
    classifier = LineClassifier(settings.bot_label, default_keywords(settings.custom_death_keywords))
    events = CliCommandHandler.classify_file(log_file, classifier, tail=tail)
    for event in events:
        print({"kind": event.kind.value, "line": format_event(event)})
    print({"events": len(events)})


@app.command()
def run(ctx: typer.Context) -> None:
    """Follow the server log and print relay events until interrupted."""
    settings = _load(ctx)
    if not settings.use_log_file:
        print({"error": "Log following is disabled (DOLPHIN_USE_LOG_FILE=false)"})
        raise typer.Exit(code=1)
    if not Path(settings.log_file_path).exists():
        print({"error": f"Log file does not exist: {settings.log_file_path}"})
        raise typer.Exit(code=1)

    orchestrator = _build_orchestrator(settings, _build_game_adapter(settings))

    async def _run() -> None:
        await orchestrator.start()
        try:
            await orchestrator.pump(ConsoleEventSender())
        finally:
            await orchestrator.stop()

    print({"following": settings.log_file_path, "bot_label": settings.bot_label})
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run())


@app.command()
def say(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Display name of the chat sender"),
    message: str = typer.Argument(..., help="Chat message to relay"),
    dry_run: bool = typer.Option(False, help="Echo commands instead of sending them over RCON"),
) -> None:
    """Relay one chat message to the Minecraft server."""
    handler = _build_handler(_load(ctx), dry_run=dry_run)
    try:
        replies = handler.relay_chat(name, message)
    except OutboundRelayError as exc:
        print({"error": exc.user_message, "sent_chunks": exc.sent_chunks, "total_chunks": exc.total_chunks})
        raise typer.Exit(code=1)
    print({"chunks": len(replies), "replies": replies})


@app.command("send-command")
def send_command(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Console command, e.g. 'list'"),
    dry_run: bool = typer.Option(False, help="Echo the command instead of sending it over RCON"),
) -> None:
    """Run one console command through RCON and print the reply."""
    handler = _build_handler(_load(ctx), dry_run=dry_run)
    try:
        reply = handler.send_command(command)
    except RconError as exc:
        print({"error": sanitize_error_text(str(exc))})
        raise typer.Exit(code=1)
    print({"command_result": reply})


if __name__ == "__main__":
    app()
