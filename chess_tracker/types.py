# chess_tracker/types.py
"""
A central module for the shared record model and computed data contracts.
"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol, Sequence, Tuple, TypeAlias, Union, runtime_checkable


class Color(str, Enum):
    WHITE = "white"; BLACK = "black"

class GameResult(str, Enum):
    WIN = "win"; LOSS = "loss"; DRAW = "draw"

class TimeControl(str, Enum):
    BLITZ = "blitz"; RAPID = "rapid"; CLASSICAL = "classical"

class GamePhase(str, Enum):
    OPENING = "opening"; MIDDLEGAME = "middlegame"; ENDGAME = "endgame"

class MistakeType(str, Enum):
    TACTICAL = "tactical"; POSITIONAL = "positional"

class TacticType(str, Enum):
    FORK = "fork"; PIN = "pin"; SKEWER = "skewer"; BACK_RANK = "backRank"
    DISCOVERED_ATTACK = "discoveredAttack"; DISCOVERED_CHECK = "discoveredCheck"
    DOUBLE_ATTACK = "doubleAttack"; REMOVAL_OF_DEFENDER = "removalOfDefender"
    DEFLECTION = "deflection"; DECOY = "decoy"; SACRIFICE = "sacrifice"
    ZWISCHENZUG = "zwischenzug"; X_RAY = "xRay"; WINDMILL = "windmill"
    DESPERADO = "desperado"; TRAPPED_PIECE = "trappedPiece"
    HANGING_PIECE = "hangingPiece"; CHECKMATE = "checkmate"; OTHER = "other"

class PositionalType(str, Enum):
    WEAK_SQUARES = "weakSquares"; BAD_BISHOP = "badBishop"
    PAWN_STRUCTURE = "pawnStructure"; KING_SAFETY = "kingSafety"
    PIECE_ACTIVITY = "pieceActivity"; SPACE_ADVANTAGE = "spaceAdvantage"
    INITIATIVE = "initiative"; BAD_TRADE = "badTrade"; WRONG_PLAN = "wrongPlan"
    PASSED_PAWN = "passedPawn"; WEAK_PAWN = "weakPawn"; OUTPOST = "outpost"
    OPEN_FILE = "openFile"; COORDINATION = "coordination"
    PROPHYLAXIS = "prophylaxis"; OTHER = "other"


# --- RECORD MODEL ---

@dataclass(frozen=True, slots=True)
class TacticalCategory:
    tactic: TacticType

    @property
    def mistake_type(self) -> MistakeType:
        return MistakeType.TACTICAL

    @property
    def key(self) -> str:
        return self.tactic.value

@dataclass(frozen=True, slots=True)
class PositionalCategory:
    positional: PositionalType

    @property
    def mistake_type(self) -> MistakeType:
        return MistakeType.POSITIONAL

    @property
    def key(self) -> str:
        return self.positional.value

# A mistake is either tactical or positional, never both.
MistakeCategory: TypeAlias = Union[TacticalCategory, PositionalCategory]

# Phases outside the three recognised buckets are kept as raw strings.
PhaseValue: TypeAlias = Union[GamePhase, str]


@dataclass(frozen=True, slots=True)
class Mistake:
    """A single logged mistake. Immutable once added to its game."""
    id: str
    category: MistakeCategory
    game_phase: PhaseValue = GamePhase.MIDDLEGAME
    time_pressure: bool = False
    note: str = ""


@dataclass(frozen=True, slots=True)
class Game:
    """A logged game and the ordered mistakes recorded against it."""
    id: str
    date: datetime.date
    color: Color
    opponent_rating: int
    result: GameResult
    opening: str
    time_control: TimeControl
    game_link: Optional[str] = None
    pgn: Optional[str] = None
    mistakes: Tuple[Mistake, ...] = field(default_factory=tuple)

    @property
    def mistake_count(self) -> int:
        return len(self.mistakes)


# --- COMPUTED DATA CONTRACTS ---

@dataclass(frozen=True, slots=True)
class OpeningPerformance:
    opening: str; win_rate_percent: int; game_count: int

@dataclass(frozen=True)
class MistakeBreakdown:
    """The shared per-invocation tally of every mistake in a snapshot."""
    by_tactic: Dict[TacticType, int]
    by_positional: Dict[PositionalType, int]
    by_phase: Dict[GamePhase, int]
    time_pressure_count: int
    total_mistake_count: int

@dataclass(frozen=True, slots=True)
class InsufficientTrend:
    """Not enough history for a comparison; only the recent window is known."""
    last_avg: float
    prev_avg: None = None

@dataclass(frozen=True, slots=True)
class MistakeTrend:
    last_avg: float; prev_avg: float; change_percent: float

TrendResult: TypeAlias = Union[InsufficientTrend, MistakeTrend]

@dataclass(frozen=True)
class InsightContext:
    """Every aggregate the insight statements draw on, computed from one snapshot."""
    total_games: int
    total_mistakes: int
    win_rate: float
    average_mistakes: float
    breakdown: MistakeBreakdown
    opening_table: List[OpeningPerformance]
    trend: Optional[TrendResult]
    trend_window: int

@dataclass(frozen=True)
class DashboardSummary:
    win_rate: float
    total_mistakes: int
    games_logged: int
    category_ranking: List[Tuple[str, int]]
    opening_table: List[OpeningPerformance]
    insights: List[str]


# --- PROTOCOLS ---

@runtime_checkable
class RecordRepository(Protocol):
    """Defines the abstract interface for the game record store."""
    async def load(self) -> List[Game]: ...
    async def save(self, games: Sequence[Game]) -> bool: ...
