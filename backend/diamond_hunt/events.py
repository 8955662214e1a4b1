"""Engine events emitted to the presentation layer."""
import logging
from dataclasses import dataclass
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class EventSink(Protocol):
    """Protocol for event sinks."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Deliver an engine event."""
        ...


class LoggingEventSink:
    """Default sink that logs engine events."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Log engine event."""
        logger.info("EVENT %s: %s", event_name, data)


@dataclass
class PhaseChanged:
    """phase_changed: emitted on entering every phase."""

    phase: str  # "BETTING" | "DRAWING" | "RESOLVED"
    countdown_seconds: int

    def to_dict(self) -> dict[str, Any]:
        return {"phase": self.phase, "countdown_seconds": self.countdown_seconds}


@dataclass
class CountdownTicked:
    """countdown_ticked: one-second tick in BETTING or RESOLVED."""

    phase: str
    seconds: int

    def to_dict(self) -> dict[str, Any]:
        return {"phase": self.phase, "seconds": self.seconds}


@dataclass
class WagerUpdated:
    competitor_id: int
    new_total: float

    def to_dict(self) -> dict[str, Any]:
        return {"competitor_id": self.competitor_id, "new_total": self.new_total}


@dataclass
class HighlightTick:
    """highlight_tick: presentation only, never affects the outcome."""

    competitor_id: int

    def to_dict(self) -> dict[str, Any]:
        return {"competitor_id": self.competitor_id}


@dataclass
class WinnerSettled:
    winner_id: int

    def to_dict(self) -> dict[str, Any]:
        return {"winner_id": self.winner_id}


@dataclass
class RoundResolved:
    """round_resolved: emitted once per round after payout."""

    winner_id: int
    multiplier: int
    winnings: float
    new_balance: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner_id": self.winner_id,
            "multiplier": self.multiplier,
            "winnings": self.winnings,
            "new_balance": self.new_balance,
        }


@dataclass
class BalanceChanged:
    new_balance: float

    def to_dict(self) -> dict[str, Any]:
        return {"new_balance": self.new_balance}


class EventService:
    """Delivers engine events to a sink."""

    def __init__(self, sink: EventSink | None = None):
        self._sink = sink or LoggingEventSink()
        self._sink_errors = 0  # Counter for sink failures

    @property
    def sink_errors(self) -> int:
        return self._sink_errors

    def set_sink(self, sink: EventSink) -> None:
        """Set the event sink (useful for testing)."""
        self._sink = sink

    def _safe_emit(self, event_name: str, data: dict[str, Any]) -> None:
        """
        Emit event with exception safety.

        Sink failures MUST NOT break the round timeline.
        """
        try:
            self._sink.emit(event_name, data)
        except Exception as e:
            self._sink_errors += 1
            logger.warning(
                "Event sink error (count=%d): %s - %s",
                self._sink_errors,
                event_name,
                str(e),
            )

    def emit_phase_changed(self, event: PhaseChanged) -> None:
        self._safe_emit("phase_changed", event.to_dict())

    def emit_countdown_ticked(self, event: CountdownTicked) -> None:
        self._safe_emit("countdown_ticked", event.to_dict())

    def emit_wager_updated(self, event: WagerUpdated) -> None:
        self._safe_emit("wager_updated", event.to_dict())

    def emit_highlight_tick(self, event: HighlightTick) -> None:
        self._safe_emit("highlight_tick", event.to_dict())

    def emit_winner_settled(self, event: WinnerSettled) -> None:
        self._safe_emit("winner_settled", event.to_dict())

    def emit_round_resolved(self, event: RoundResolved) -> None:
        self._safe_emit("round_resolved", event.to_dict())

    def emit_balance_changed(self, event: BalanceChanged) -> None:
        self._safe_emit("balance_changed", event.to_dict())
