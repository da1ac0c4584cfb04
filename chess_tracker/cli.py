# chess_tracker/cli.py
"""
Command-line host for the Chess Tracker.

Each command loads a snapshot from the record store, applies at most one
mutation through the `GameLog`, saves the result, and prints plain text.
Statistics and insights are always computed from the freshly loaded or
freshly mutated snapshot.
"""

import asyncio
import datetime
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

import click
import structlog

from chess_tracker.config.settings import Settings
from chess_tracker.containers import get_container
from chess_tracker.core.aggregators import category_share
from chess_tracker.core.formatting import format_key, pluralize
from chess_tracker.core.insight_generator import build_dashboard_summary, generate_insights
from chess_tracker.exceptions import ChessTrackerError
from chess_tracker.services.game_log import GameLog
from chess_tracker.types import (Color, Game, GamePhase, GameResult, Mistake, PositionalCategory,
                                 PositionalType, RecordRepository, TacticalCategory, TacticType,
                                 TimeControl)
from chess_tracker.utils import metrics
from chess_tracker.utils.logging_config import setup_logging

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _choice(enum_cls) -> click.Choice:
    return click.Choice([member.value for member in enum_cls])


# --- Store access ---

async def _load_games(store: RecordRepository) -> List[Game]:
    async with store:
        return await store.load()


async def _find_game(store: RecordRepository, game_id: str) -> Game:
    return GameLog(await _load_games(store)).get_game(game_id)


async def _apply_mutation(store: RecordRepository, mutate: Callable[[GameLog], T]) -> T:
    """Loads the log, applies one mutation, and saves the new snapshot."""
    async with store:
        log = GameLog(await store.load())
        outcome = mutate(log)
        if not await store.save(log.games):
            raise click.ClickException("The change could not be saved; see the log for details.")
        return outcome


def _run(ctx: click.Context, coro_factory: Callable[[RecordRepository], Awaitable[T]]) -> T:
    store = ctx.obj["container"].resolve(RecordRepository)
    try:
        return asyncio.run(coro_factory(store))
    except ChessTrackerError as e:
        raise click.ClickException(str(e)) from e


# --- Rendering ---

def _echo_insights(games: Sequence[Game]) -> None:
    metrics.INSIGHT_GENERATIONS_TOTAL.inc()
    metrics.SNAPSHOT_SIZE_GAMES.observe(len(games))
    for statement in generate_insights(games):
        click.echo(f"• {statement}")


def _describe_game(game: Game) -> str:
    return (
        f"{game.id}  {game.date.isoformat()}  {game.color.value:<5}  {game.result.value:<4}  "
        f"vs {game.opponent_rating:<5} {game.time_control.value:<9}  {game.opening}  "
        f"({game.mistake_count} {pluralize(game.mistake_count, 'mistake')})"
    )


def _describe_mistake(mistake: Mistake) -> str:
    phase = mistake.game_phase.value if isinstance(mistake.game_phase, GamePhase) else mistake.game_phase
    line = f"{mistake.category.mistake_type.value}: {format_key(mistake.category.key)} ({phase})"
    if mistake.time_pressure:
        line += " [time pressure]"
    if mistake.note:
        line += f" - {mistake.note}"
    return line


def _echo_game_detail(game: Game, with_pgn: bool = False) -> None:
    click.echo(_describe_game(game))
    if game.game_link:
        click.echo(f"    link: {game.game_link}")
    for mistake in game.mistakes:
        click.echo(f"    - {_describe_mistake(mistake)}")
    if with_pgn and game.pgn:
        click.echo("    pgn:")
        for line in game.pgn.splitlines():
            click.echo(f"      {line}")


# --- Commands ---

@click.group()
@click.option("--db", "db_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="SQLite database holding the game log.")
@click.option("--log-level", default=None, help="Logging level, e.g. DEBUG or WARNING.")
@click.pass_context
def cli(ctx: click.Context, db_path: Optional[Path], log_level: Optional[str]) -> None:
    """Log chess games and mistakes, and get improvement insights."""
    settings = Settings()
    if db_path is not None:
        settings.store.db_filepath = str(db_path)
    setup_logging(
        log_level=log_level or settings.default_log_level,
        log_file=Path(settings.log_file) if settings.log_file else None,
        force_json_console=settings.json_logs,
    )
    ctx.ensure_object(dict)
    ctx.obj["container"] = get_container(settings)
    logger.debug("CLI initialised.", db=settings.store.db_filepath)


@cli.command()
@click.pass_context
def insights(ctx: click.Context) -> None:
    """Print the improvement insights for all logged games."""
    games = _run(ctx, _load_games)
    _echo_insights(games)


@cli.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Print the dashboard statistics: KPIs, top mistakes and opening performance."""
    games = _run(ctx, _load_games)
    summary = build_dashboard_summary(games)

    click.echo(f"Win rate:       {summary.win_rate:.1f}%")
    click.echo(f"Total mistakes: {summary.total_mistakes}")
    click.echo(f"Games logged:   {summary.games_logged}")

    click.echo("\nMost missed tactics & positional errors:")
    if not summary.category_ranking:
        click.echo("  No mistakes logged yet. Add a game to get started!")
    for key, count in summary.category_ranking:
        share = category_share(count, summary.total_mistakes)
        click.echo(f"  {format_key(key):<24} {count:>4}  ({share:.0f}%)")

    click.echo("\nOpening performance:")
    if not summary.opening_table:
        click.echo("  No games logged yet.")
    for row in summary.opening_table:
        click.echo(f"  {row.opening:<30} {row.game_count:>3} games  {row.win_rate_percent:>3}%")


@cli.command(name="list")
@click.pass_context
def list_games(ctx: click.Context) -> None:
    """List the game history, newest first, with each game's mistakes."""
    games = _run(ctx, _load_games)
    if not games:
        click.echo("No games logged yet.")
    for game in sorted(games, key=lambda g: g.date, reverse=True):
        _echo_game_detail(game)


@cli.command()
@click.argument("game_id")
@click.pass_context
def show(ctx: click.Context, game_id: str) -> None:
    """Show one game in full: details, link, mistakes and PGN."""
    game = _run(ctx, lambda store: _find_game(store, game_id))
    _echo_game_detail(game, with_pgn=True)


@cli.command(name="add-game")
@click.option("--date", "game_date", type=_DATE, default=None, help="Game date (YYYY-MM-DD), defaults to today.")
@click.option("--color", type=_choice(Color), default=Color.WHITE.value, show_default=True)
@click.option("--rating", "opponent_rating", type=int, required=True, help="Opponent rating.")
@click.option("--result", type=_choice(GameResult), default=GameResult.WIN.value, show_default=True)
@click.option("--opening", required=True, help="Opening name.")
@click.option("--time-control", type=_choice(TimeControl), default=TimeControl.RAPID.value, show_default=True)
@click.option("--link", "game_link", default=None, help="Link to the game online.")
@click.option("--pgn", default=None, help="PGN text of the game.")
@click.pass_context
def add_game(ctx: click.Context, game_date: Optional[datetime.datetime], color: str, opponent_rating: int,
             result: str, opening: str, time_control: str, game_link: Optional[str], pgn: Optional[str]) -> None:
    """Log a new game. Prints the new game's id for adding mistakes."""
    game = _run(ctx, lambda store: _apply_mutation(store, lambda log: log.add_game(
        date=game_date.date() if game_date else datetime.date.today(),
        color=Color(color), opponent_rating=opponent_rating, result=GameResult(result),
        opening=opening, time_control=TimeControl(time_control), game_link=game_link, pgn=pgn,
    )))
    click.echo(f"Added game {game.id}.")


@cli.command(name="edit-game")
@click.argument("game_id")
@click.option("--date", "game_date", type=_DATE, default=None)
@click.option("--color", type=_choice(Color), default=None)
@click.option("--rating", "opponent_rating", type=int, default=None)
@click.option("--result", type=_choice(GameResult), default=None)
@click.option("--opening", default=None)
@click.option("--time-control", type=_choice(TimeControl), default=None)
@click.option("--link", "game_link", default=None)
@click.option("--pgn", default=None)
@click.pass_context
def edit_game(ctx: click.Context, game_id: str, game_date: Optional[datetime.datetime], color: Optional[str],
              opponent_rating: Optional[int], result: Optional[str], opening: Optional[str],
              time_control: Optional[str], game_link: Optional[str], pgn: Optional[str]) -> None:
    """Edit the details of a logged game. Its mistakes are kept."""
    changes = {
        "date": game_date.date() if game_date else None,
        "color": Color(color) if color else None,
        "opponent_rating": opponent_rating,
        "result": GameResult(result) if result else None,
        "opening": opening,
        "time_control": TimeControl(time_control) if time_control else None,
        "game_link": game_link,
        "pgn": pgn,
    }
    changes = {name: value for name, value in changes.items() if value is not None}
    if not changes:
        raise click.UsageError("Nothing to change; pass at least one option.")
    _run(ctx, lambda store: _apply_mutation(store, lambda log: log.edit_game(game_id, **changes)))
    click.echo(f"Updated game {game_id}.")


@cli.command(name="delete-game")
@click.argument("game_id")
@click.confirmation_option(prompt="Are you sure you want to delete this game?")
@click.pass_context
def delete_game(ctx: click.Context, game_id: str) -> None:
    """Delete a game and all of its mistakes."""
    removed = _run(ctx, lambda store: _apply_mutation(store, lambda log: log.delete_game(game_id)))
    click.echo(f"Deleted game {game_id} and {removed.mistake_count} {pluralize(removed.mistake_count, 'mistake')}.")


@cli.command(name="add-mistake")
@click.argument("game_id")
@click.option("--tactic", type=_choice(TacticType), default=None, help="Tactical category.")
@click.option("--positional", type=_choice(PositionalType), default=None, help="Positional category.")
@click.option("--phase", type=_choice(GamePhase), default=GamePhase.MIDDLEGAME.value, show_default=True)
@click.option("--time-pressure/--no-time-pressure", default=False, show_default=True)
@click.option("--note", default="", help="Free-text note.")
@click.pass_context
def add_mistake(ctx: click.Context, game_id: str, tactic: Optional[str], positional: Optional[str],
                phase: str, time_pressure: bool, note: str) -> None:
    """Add a tactical (--tactic) or positional (--positional) mistake to a game."""
    if (tactic is None) == (positional is None):
        raise click.UsageError("Pass exactly one of --tactic or --positional.")
    category = TacticalCategory(TacticType(tactic)) if tactic else PositionalCategory(PositionalType(positional))
    mistake = _run(ctx, lambda store: _apply_mutation(store, lambda log: log.add_mistake(
        game_id, category, game_phase=GamePhase(phase), time_pressure=time_pressure, note=note,
    )))
    click.echo(f"Added {format_key(category.key)} mistake {mistake.id} to game {game_id}.")


def main() -> None:
    cli(obj={})
