"""Typer CLI for running a party game in the terminal."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import structlog
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..config.settings import DEFAULT_CONFIG_PATH, Settings, load_settings
from ..core.catalog import load_question_catalog
from ..core.errors import GameError
from ..core.game import Game, GameStats, GameStatus, GameTurn
from ..core.player import Player
from .session_store import SessionStore

LOGGER = structlog.get_logger(__name__)

app = typer.Typer(help="Play FreeColo party games.", invoke_without_command=False)
console = Console()
_configured_logging = False

QUIT_ANSWERS = {"q", "quit", "exit"}


def configure_logging(level: str = "INFO") -> None:
    global _configured_logging
    if _configured_logging:
        return
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        cache_logger_on_first_use=True,
    )
    _configured_logging = True


def _bootstrap(config: Path) -> Settings:
    load_dotenv()
    settings = load_settings(config)
    configure_logging(settings.log_level)
    return settings


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    raise typer.Exit(code=1)


def _render_turn(turn: GameTurn, total: int) -> None:
    title = f"Turn {turn.turn_number}/{total} · {turn.question.type.value}"
    console.print(Panel(turn.processed_text, title=title, subtitle=turn.selected_player.name))


def _render_stats(stats: GameStats) -> None:
    table = Table(title=f"{stats.completion_percentage:.0f}% complete · {stats.questions_remaining} left")
    table.add_column("Player")
    table.add_column("Turns", justify="right")
    table.add_column("Share", justify="right")
    for entry in stats.player_stats:
        table.add_row(entry.player_name, str(entry.times_selected), f"{entry.selection_percentage}%")
    console.print(table)


def _play_turns(game: Game, store: SessionStore, roster: List[Player], turns: int) -> None:
    total = len(game.catalog.questions)
    played = 0
    while not game.is_game_finished():
        if turns and played >= turns:
            game.pause()
            break
        if not turns:
            answer = typer.prompt("Press Enter for the next turn (q to quit)", default="", show_default=False)
            if answer.strip().lower() in QUIT_ANSWERS:
                game.pause()
                break
        _render_turn(game.advance(), total)
        played += 1
        store.save(roster, game)
    store.save(roster, game)


@app.command("catalog")
def show_catalog(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to settings JSON"),
    catalog_path: Optional[Path] = typer.Option(None, "--catalog", help="Catalog JSON to inspect"),
) -> None:
    """Print a summary of the question catalog."""

    settings = _bootstrap(config)
    try:
        catalog = load_question_catalog(catalog_path or settings.catalog_path)
    except GameError as exc:
        _fail(str(exc))

    meta = catalog.metadata
    table = Table(title=f"{catalog.name} ({catalog.id})")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Questions", str(len(catalog.questions)))
    table.add_row("Players", f"{meta.min_players}-{meta.max_players}")
    table.add_row("Difficulty", ", ".join(meta.difficulty) or "-")
    table.add_row("Tags", ", ".join(meta.tags) or "-")
    console.print(table)


@app.command("play")
def play(
    names: Optional[List[str]] = typer.Argument(None, help="Player names for a new game"),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to settings JSON"),
    resume: bool = typer.Option(False, "--resume", help="Continue the saved game"),
    turns: int = typer.Option(0, help="Play this many turns without prompting (0 = interactive)"),
) -> None:
    """Start a new game, or resume the saved one, and play turns."""

    settings = _bootstrap(config)
    store = SessionStore(settings.session_dir)

    try:
        if resume:
            saved = store.load()
            game = saved.game
            if game is None:
                _fail("No saved game to resume")
            roster = saved.players or game.get_players()
            if game.is_game_finished():
                console.print("The saved game is already finished.")
                _render_stats(game.get_stats())
                return
            if game.get_status() == GameStatus.SETUP:
                if game.get_game_history():
                    game.resume()
                else:
                    game.start()
        else:
            roster = [Player(name) for name in names or []]
            if len(roster) < settings.min_players_to_start:
                _fail(f"At least {settings.min_players_to_start} players required")
            catalog = load_question_catalog(settings.catalog_path)
            game = Game(roster, catalog)
            game.start()

        LOGGER.info("cli.play", resume=resume, players=len(roster), status=game.get_status().value)
        _play_turns(game, store, roster, turns)
    except GameError as exc:
        _fail(str(exc))

    if game.is_game_finished():
        console.print("[bold green]All questions played![/bold green]")
    _render_stats(game.get_stats())


@app.command("stats")
def stats(config: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to settings JSON")) -> None:
    """Show statistics for the saved game."""

    settings = _bootstrap(config)
    game = SessionStore(settings.session_dir).load().game
    if game is None:
        _fail("No saved game")
    console.print(f"Status: {game.get_status().value}")
    _render_stats(game.get_stats())


@app.command("reset")
def reset(config: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to settings JSON")) -> None:
    """Forget the saved roster and game."""

    settings = _bootstrap(config)
    SessionStore(settings.session_dir).clear()
    console.print("Saved session cleared.")


if __name__ == "__main__":  # pragma: no cover
    app()
