# chess_tracker/core/mistake_breakdown.py
"""
Provides a pure function that tallies every mistake in a snapshot in a
single pass, by category, game phase and time-pressure flag.
"""

from typing import Dict, Optional, Sequence

import structlog

from chess_tracker.types import (Game, GamePhase, MistakeBreakdown, PositionalCategory,
                                 PositionalType, TacticalCategory, TacticType)

logger = structlog.get_logger(__name__)


def _as_phase(value: object) -> Optional[GamePhase]:
    """Maps a stored phase onto one of the three buckets, or None if unrecognised."""
    try:
        return GamePhase(value)
    except ValueError:
        return None


def compute_mistake_breakdown(games: Sequence[Game]) -> MistakeBreakdown:
    """
    Tallies all mistakes across the given games.

    Mistakes whose phase is not opening, middlegame or endgame still count
    towards the totals but are left out of the phase buckets.

    Args:
        games: The snapshot of logged games.

    Returns:
        A `MistakeBreakdown` holding the category, phase and time-pressure tallies.
    """
    by_tactic: Dict[TacticType, int] = {}
    by_positional: Dict[PositionalType, int] = {}
    by_phase: Dict[GamePhase, int] = {phase: 0 for phase in GamePhase}
    time_pressure_count = 0
    total_mistake_count = 0
    unbucketed = 0

    for game in games:
        for mistake in game.mistakes:
            total_mistake_count += 1
            if mistake.time_pressure:
                time_pressure_count += 1

            category = mistake.category
            if isinstance(category, TacticalCategory):
                by_tactic[category.tactic] = by_tactic.get(category.tactic, 0) + 1
            elif isinstance(category, PositionalCategory):
                by_positional[category.positional] = by_positional.get(category.positional, 0) + 1

            phase = _as_phase(mistake.game_phase)
            if phase is None:
                unbucketed += 1
                continue
            by_phase[phase] += 1

    if unbucketed:
        logger.debug("Mistakes with an unrecognised phase left out of phase buckets.", count=unbucketed)

    return MistakeBreakdown(
        by_tactic=by_tactic,
        by_positional=by_positional,
        by_phase=by_phase,
        time_pressure_count=time_pressure_count,
        total_mistake_count=total_mistake_count,
    )
