"""Roster and round state models."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Phase(str, Enum):
    """Round phase."""
    BETTING = "BETTING"
    DRAWING = "DRAWING"
    RESOLVED = "RESOLVED"


class Competitor(BaseModel):
    """Immutable roster entry; fixed for the life of the engine."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    odds: float = Field(gt=0)
    display_tag: str


DEFAULT_ROSTER: tuple[Competitor, ...] = (
    Competitor(id=1, name="Rabbit", odds=5.0, display_tag="🐰"),
    Competitor(id=2, name="Cat", odds=5.0, display_tag="🐱"),
    Competitor(id=3, name="Dog", odds=5.0, display_tag="🐶"),
    Competitor(id=4, name="Sheep", odds=5.0, display_tag="🐑"),
    Competitor(id=5, name="Dolphin", odds=10.0, display_tag="🐬"),
    Competitor(id=6, name="Panda", odds=15.0, display_tag="🐼"),
    Competitor(id=7, name="Eagle", odds=25.0, display_tag="🦅"),
    Competitor(id=8, name="Lion", odds=45.0, display_tag="🦁"),
)


class Round(BaseModel):
    """
    The single active round.

    Tracks:
    - phase (BETTING/DRAWING/RESOLVED)
    - bets keyed by competitor id
    - hidden luck factor, drawn on entering DRAWING
    - winner and multiplier, set on entering RESOLVED
    - per-phase countdowns in seconds
    """
    round_number: int = 1
    phase: Phase = Phase.BETTING

    bets: dict[int, float] = Field(default_factory=dict)

    luck_factor: float | None = None
    winner_id: int | None = None
    multiplier: int | None = None
    winnings: float = 0.0

    betting_countdown: int = 0
    next_round_countdown: int = 0


class Outcome(BaseModel):
    """Result of an outcome draw."""
    winner_id: int
    multiplier: int


class RoundSnapshot(BaseModel):
    """Read-only view of engine state for consumers. Never carries the luck factor."""
    round_number: int
    phase: Phase
    countdown: int
    balance: float
    bets: dict[int, float]
    total_wagered: float
    stake: float | None = None
    winner_id: int | None = None
    multiplier: int | None = None
    winnings: float = 0.0
    highlighted_id: int | None = None
    recent_results: list[str] = Field(default_factory=list)
    message: str = ""
    roster: list[Competitor] = Field(default_factory=list)
