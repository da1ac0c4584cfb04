# chess_tracker/core/insight_generator.py
"""
Generates the ordered, human-readable insights for a game log.

This module provides a pure function that takes a snapshot of logged games
and turns the aggregates into short recommendations. It follows a
"Prepare, Decide, Render" pattern: all statistics are computed once into an
immutable `InsightContext`, then a fixed pipeline of statement renderers
decides whether each statement applies and formats it.
"""

from typing import Callable, Dict, List, Optional, Sequence, Tuple

import structlog

from chess_tracker.core.aggregators import (average_mistakes_per_game, opening_table,
                                            tactic_ranking, total_mistakes, win_rate)
from chess_tracker.core.formatting import format_fixed, format_key, pluralize
from chess_tracker.core.mistake_breakdown import compute_mistake_breakdown
from chess_tracker.core.trend_detector import DEFAULT_TREND_WINDOW, compute_mistake_trend
from chess_tracker.types import (DashboardSummary, Game, GamePhase, InsightContext,
                                 InsufficientTrend, TacticType)

logger = structlog.get_logger(__name__)

TIME_PRESSURE_THRESHOLD = 0.25
MIN_GAMES_FOR_OPENING_WATCH = 2

NO_GAMES_INSIGHT = "No games yet — add a game to generate insights."
CLOSING_RECOMMENDATION = (
    "Recommended plan: 10–15 minutes/day of targeted tactics (start with your top "
    "missed tactic), 3× weekly 15-minute quick games focusing on time control, and "
    "review 2 games/week with annotations."
)

_GENERIC_DRILL = "mixed tactical puzzles around this motif"

# Must cover every TacticType.
TACTIC_DRILLS: Dict[TacticType, str] = {
    TacticType.FORK: "fork puzzles and knight coordination drills",
    TacticType.PIN: "pin & skewers practice",
    TacticType.SKEWER: _GENERIC_DRILL,
    TacticType.BACK_RANK: "back-rank mate pattern drills",
    TacticType.DISCOVERED_ATTACK: _GENERIC_DRILL,
    TacticType.DISCOVERED_CHECK: _GENERIC_DRILL,
    TacticType.DOUBLE_ATTACK: _GENERIC_DRILL,
    TacticType.REMOVAL_OF_DEFENDER: _GENERIC_DRILL,
    TacticType.DEFLECTION: _GENERIC_DRILL,
    TacticType.DECOY: _GENERIC_DRILL,
    TacticType.SACRIFICE: _GENERIC_DRILL,
    TacticType.ZWISCHENZUG: "zwischenzug pattern recognition",
    TacticType.X_RAY: "x-ray and battery tactics",
    TacticType.WINDMILL: _GENERIC_DRILL,
    TacticType.DESPERADO: _GENERIC_DRILL,
    TacticType.TRAPPED_PIECE: _GENERIC_DRILL,
    TacticType.HANGING_PIECE: _GENERIC_DRILL,
    TacticType.CHECKMATE: _GENERIC_DRILL,
    TacticType.OTHER: _GENERIC_DRILL,
}

PHASE_FOCUS: Dict[GamePhase, str] = {
    GamePhase.OPENING: "targeted opening drills",
    GamePhase.MIDDLEGAME: "tactics and calculation exercises",
    GamePhase.ENDGAME: "endgame technique",
}


# --- 1. PREPARE: Build the context once per invocation ---

def _build_insight_context(games: Sequence[Game]) -> InsightContext:
    """
    PREPARE STEP: Computes every aggregate the statements need from one snapshot.

    Args:
        games: The snapshot of logged games.

    Returns:
        An `InsightContext` shared by all statement renderers.
    """
    return InsightContext(
        total_games=len(games),
        total_mistakes=total_mistakes(games),
        win_rate=win_rate(games),
        average_mistakes=average_mistakes_per_game(games),
        breakdown=compute_mistake_breakdown(games),
        opening_table=opening_table(games),
        trend=compute_mistake_trend(games, DEFAULT_TREND_WINDOW),
        trend_window=DEFAULT_TREND_WINDOW,
    )


def _most_frequent(counts: Dict) -> Optional[Tuple]:
    """Returns the first `(key, count)` pair with the highest count, or None."""
    if not counts:
        return None
    return max(counts.items(), key=lambda item: item[1])


# --- 2 & 3. DECIDE and RENDER: one function per statement ---
# Each returns the statement text, or None when it does not apply.

def _render_summary(context: InsightContext) -> Optional[str]:
    games, mistakes = context.total_games, context.total_mistakes
    return (
        f"You've logged {games} {pluralize(games, 'game')} with {mistakes} total "
        f"{pluralize(mistakes, 'mistake')}. Your win rate is {context.win_rate:.1f}%."
    )

def _render_average_mistakes(context: InsightContext) -> Optional[str]:
    return f"Average mistakes per game: ~{format_fixed(context.average_mistakes, 2)}."

def _render_top_tactic(context: InsightContext) -> Optional[str]:
    top = _most_frequent(context.breakdown.by_tactic)
    if top is None:
        return None
    tactic, count = top
    return (
        f"Top missed tactic: {format_key(tactic.value)} — {count} "
        f"{pluralize(count, 'time')}. Drill {TACTIC_DRILLS[tactic]}."
    )

def _render_top_positional(context: InsightContext) -> Optional[str]:
    top = _most_frequent(context.breakdown.by_positional)
    if top is None:
        return None
    positional, count = top
    return (
        f"Top positional weakness: {format_key(positional.value)} — {count} "
        f"{pluralize(count, 'time')}. Study typical plans and motifs."
    )

def _render_time_pressure(context: InsightContext) -> Optional[str]:
    total = context.breakdown.total_mistake_count
    if total == 0:
        return None
    fraction = context.breakdown.time_pressure_count / total
    percent = format_fixed(fraction * 100, 0)
    if fraction > TIME_PRESSURE_THRESHOLD:
        return (
            f"{percent}% of mistakes happen under time pressure. Practice faster tactics "
            f"and time management (e.g., 5×5 minute tactic sprints)."
        )
    return f"{percent}% of mistakes happen under time pressure."

def _render_phase_focus(context: InsightContext) -> Optional[str]:
    top = _most_frequent(context.breakdown.by_phase)
    if top is None or top[1] == 0:
        return None
    phase = top[0]
    return f"Most mistakes occur in the {phase.value}. Focus training there ({PHASE_FOCUS[phase]})."

def _render_opening_watch(context: InsightContext) -> Optional[str]:
    candidates = [
        row for row in context.opening_table if row.game_count >= MIN_GAMES_FOR_OPENING_WATCH
    ]
    if not candidates:
        return None
    worst = min(candidates, key=lambda row: row.win_rate_percent)
    return (
        f"Opening to watch: {worst.opening} — {worst.win_rate_percent}% win rate over "
        f"{worst.game_count} games. Consider reviewing main lines and common traps."
    )

def _render_trend(context: InsightContext) -> Optional[str]:
    trend, window = context.trend, context.trend_window
    if trend is None:
        return None
    if isinstance(trend, InsufficientTrend):
        return (
            f"Play at least {window} more games to generate trend insights "
            f"(we compare recent vs previous games)."
        )
    delta = trend.change_percent
    if delta > 0:
        direction = "increased"
    elif delta < 0:
        direction = "decreased"
    else:
        direction = "stayed about the same"
    return (
        f"Mistakes per game over the last {window} games {direction} by "
        f"{format_fixed(abs(delta), 0)}% compared to the previous {window} games "
        f"(last avg: {format_fixed(trend.last_avg, 2)} mistakes/game)."
    )

def _render_closing_recommendation(context: InsightContext) -> Optional[str]:
    return CLOSING_RECOMMENDATION


# --- Public API ---

# Statements are emitted in this order; the closing recommendation is always last.
INSIGHT_PIPELINE: List[Tuple[str, Callable[[InsightContext], Optional[str]]]] = [
    ("summary", _render_summary),
    ("average_mistakes", _render_average_mistakes),
    ("top_tactic", _render_top_tactic),
    ("top_positional", _render_top_positional),
    ("time_pressure", _render_time_pressure),
    ("phase_focus", _render_phase_focus),
    ("opening_watch", _render_opening_watch),
    ("trend", _render_trend),
    ("closing_recommendation", _render_closing_recommendation),
]


def generate_insights(games: Sequence[Game]) -> List[str]:
    """
    Generates the ordered list of insight statements for a snapshot of games.

    The function is pure: the same snapshot always yields the same list, and
    nothing is cached between calls.

    Args:
        games: The snapshot of logged games.

    Returns:
        A non-empty list of statements. An empty collection yields exactly one
        "no games" statement.
    """
    if not games:
        return [NO_GAMES_INSIGHT]

    # 1. PREPARE: Calculate all aggregates once.
    context = _build_insight_context(games)

    # 2 & 3. DECIDE and RENDER each statement in pipeline order.
    insights = []
    for _name, renderer in INSIGHT_PIPELINE:
        statement = renderer(context)
        if statement is not None:
            insights.append(statement)

    logger.debug("Generated insights.", games=context.total_games, statements=len(insights))
    return insights


def build_dashboard_summary(games: Sequence[Game]) -> DashboardSummary:
    """Collects the dashboard KPIs, tables and insights for one snapshot."""
    return DashboardSummary(
        win_rate=win_rate(games),
        total_mistakes=total_mistakes(games),
        games_logged=len(games),
        category_ranking=tactic_ranking(games),
        opening_table=opening_table(games),
        insights=generate_insights(games),
    )
