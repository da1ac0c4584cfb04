# chess_tracker/core/trend_detector.py
"""
Provides a pure function that compares recent mistake rates with earlier ones.

Games are ordered by date and split into two trailing windows of equal size:
the most recent `window_size` games and the `window_size` games before them.
A trend is only reported when the earlier window is complete; anything less
is reported as insufficient history rather than compared on partial data.
"""

import statistics
from typing import List, Optional, Sequence

from chess_tracker.types import Game, InsufficientTrend, MistakeTrend, TrendResult

DEFAULT_TREND_WINDOW = 10


def _average_mistakes(games: List[Game]) -> float:
    """Mean mistake count per game. Returns 0.0 for an empty window."""
    return statistics.fmean(game.mistake_count for game in games) if games else 0.0


def _change_percent(last_avg: float, prev_avg: float) -> float:
    """
    Relative change from the previous window to the last one, in percent.

    A zero baseline cannot be divided by, so it reports 0% when both windows
    are mistake-free and 100% when mistakes appeared from nothing.
    """
    if prev_avg == 0:
        return 0.0 if last_avg == 0 else 100.0
    return (last_avg - prev_avg) / prev_avg * 100


def compute_mistake_trend(
    games: Sequence[Game], window_size: int = DEFAULT_TREND_WINDOW
) -> Optional[TrendResult]:
    """
    Detects the trend in mistakes per game between two trailing windows.

    Args:
        games: The snapshot of logged games, in any order.
        window_size: The number of games in each window.

    Returns:
        None for an empty collection, an `InsufficientTrend` when fewer than
        `window_size` games precede the recent window, otherwise a `MistakeTrend`.

    Raises:
        ValueError: If `window_size` is less than one.
    """
    if window_size < 1:
        raise ValueError(f"window_size must be at least 1, got {window_size}.")
    if not games:
        return None

    # `sorted` is stable, so games sharing a date keep their collection order.
    ordered = sorted(games, key=lambda game: game.date)
    last = ordered[-window_size:]
    preceding = ordered[:-window_size]
    prev = preceding[-window_size:] if len(preceding) >= window_size else []

    last_avg = _average_mistakes(last)
    if not prev:
        return InsufficientTrend(last_avg=last_avg)

    prev_avg = _average_mistakes(prev)
    return MistakeTrend(
        last_avg=last_avg,
        prev_avg=prev_avg,
        change_percent=_change_percent(last_avg, prev_avg),
    )
