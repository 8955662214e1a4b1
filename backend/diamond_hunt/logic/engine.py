"""Round engine: the phase state machine behind each betting round."""
import logging
from functools import wraps
from typing import Sequence

from diamond_hunt.config import Settings, settings
from diamond_hunt.errors import ErrorCode, GameError
from diamond_hunt.events import (
    BalanceChanged,
    CountdownTicked,
    EventService,
    HighlightTick,
    PhaseChanged,
    RoundResolved,
    WagerUpdated,
    WinnerSettled,
)
from diamond_hunt.logic.bet_book import BetBook
from diamond_hunt.logic.ledger import Ledger
from diamond_hunt.logic.models import (
    DEFAULT_ROSTER,
    Competitor,
    Phase,
    Round,
    RoundSnapshot,
)
from diamond_hunt.logic.outcome import OutcomeSelector
from diamond_hunt.logic.payout import PayoutCalculator
from diamond_hunt.logic.recent_results import RecentResultsLog
from diamond_hunt.logic.rng import RNGBase
from diamond_hunt.logic.scheduler import AsyncioScheduler, Scheduler, TimerGroup
from diamond_hunt.validators import validate_positive_amount, validate_stake


logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0


def reports_rejections(func):
    """
    Command decorator: a GameError becomes the player-facing message.

    The error is re-raised so the caller gets the rejection reason; the
    round clock is not touched.
    """
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except GameError as e:
            logger.info("Rejected %s: %s (%s)", func.__name__, e.message, e.code.value)
            self.message = e.message
            raise

    return wrapper


class RoundEngine:
    """
    Round state machine.

    Phases cycle BETTING -> DRAWING -> RESOLVED -> BETTING. Every timer is
    owned by the current phase's TimerGroup, and entering a phase cancels
    the previous group before any new timer is scheduled.

    Timeline per round (defaults):
    - BETTING: 30 one-second ticks, then DRAWING
    - DRAWING: highlight every 100ms; winner fixed at 2500ms; payout 300ms later
    - RESOLVED: 5 one-second ticks (or force_play_again), then a fresh round
    """

    def __init__(
        self,
        roster: Sequence[Competitor] = DEFAULT_ROSTER,
        rng: RNGBase | None = None,
        scheduler: Scheduler | None = None,
        events: EventService | None = None,
        ledger: Ledger | None = None,
        config: Settings | None = None,
    ):
        self.config = config or settings
        self.roster = tuple(roster)
        ids = [c.id for c in self.roster]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Competitor ids must be unique, got {ids}")
        self._by_id = {c.id: c for c in self.roster}

        self.ledger = ledger or Ledger(self.config.starting_balance)
        self.bet_book = BetBook(self.ledger, self.roster)
        self.selector = OutcomeSelector(self.roster, rng, self.config)
        self.payout = PayoutCalculator(self.ledger, self.roster)
        self.recent_results = RecentResultsLog(self.config.recent_results_limit)
        self.scheduler = scheduler or AsyncioScheduler()
        self.events = events or EventService()

        self.round = Round(round_number=1)
        self.stake: float | None = None
        self.message = ""
        self.highlighted_id: int | None = None

        self._timers: TimerGroup | None = None
        self._highlight_key: int | None = None
        self._highlight_index = 0

    # ---- lifecycle ----

    @property
    def running(self) -> bool:
        return self._timers is not None and not self._timers.closed

    def start(self) -> None:
        """
        Start, or resume after stop(), from the current round's phase.

        BETTING restarts the full countdown with existing bets kept.
        DRAWING redraws from scratch unless the winner is already fixed, in
        which case it is paid at once. RESOLVED moves on to a fresh round.
        """
        if self.running:
            raise RuntimeError("Engine already started")
        rnd = self.round
        if rnd.phase == Phase.BETTING:
            self._enter_betting()
        elif rnd.phase == Phase.DRAWING:
            if rnd.winner_id is None:
                self._enter_drawing()
            else:
                self._pay_out()
        else:
            self._start_next_round()

    def stop(self) -> None:
        """Cancel every pending timer; the engine stays queryable and can be started again."""
        if self._timers is not None:
            self._timers.cancel_all()
            self._timers = None
        self._highlight_key = None
        logger.info("Engine stopped in round %d (%s)", self.round.round_number, self.round.phase.value)

    # ---- commands ----

    @reports_rejections
    def select_stake(self, amount: float) -> float:
        """Choose the default wager size for subsequent place_wager calls."""
        self._require_phase(Phase.BETTING, "Stakes can only be chosen while betting is open.")
        validate_stake(amount, self.config.stake_values)
        self.stake = amount
        return amount

    @reports_rejections
    def place_wager(self, competitor_id: int, amount: float | None = None) -> float:
        """
        Wager on a competitor; returns the new total wagered on it.

        Without an amount the selected stake is used.
        """
        if amount is None:
            self._require_phase(Phase.BETTING, "Bets are closed for this round.")
            if self.stake is None:
                raise GameError(ErrorCode.INVALID_AMOUNT, "Please select a bet amount first!")
            amount = self.stake

        new_total = self.bet_book.place_wager(self.round, competitor_id, amount)
        competitor = self._by_id[competitor_id]
        self.message = f"Bet 💎{amount:g} added to {competitor.name}."
        self.events.emit_wager_updated(WagerUpdated(competitor_id, new_total))
        self.events.emit_balance_changed(BalanceChanged(self.ledger.balance))
        return new_total

    @reports_rejections
    def request_top_up(self, amount: float) -> float:
        """Credit the ledger with a completed top-up; allowed in any phase."""
        validate_positive_amount(amount, "Top-up")
        balance = self.ledger.credit(amount)
        self.message = f"✅ Successfully added 💎{amount:g} to your balance!"
        logger.info("Top-up of %s credited, balance %s", amount, balance)
        self.events.emit_balance_changed(BalanceChanged(balance))
        return balance

    @reports_rejections
    def force_play_again(self) -> None:
        """
        Skip the rest of the RESOLVED countdown.

        Rejected while stopped: a new round would schedule timers, and only
        start() may do that.
        """
        self._require_phase(Phase.RESOLVED, "The round has not finished yet.")
        if not self.running:
            raise GameError(ErrorCode.INVALID_PHASE_FOR_ACTION, "The game is paused.")
        self._start_next_round()

    # ---- queries ----

    def snapshot(self) -> RoundSnapshot:
        rnd = self.round
        if rnd.phase == Phase.BETTING:
            countdown = rnd.betting_countdown
        elif rnd.phase == Phase.RESOLVED:
            countdown = rnd.next_round_countdown
        else:
            countdown = 0
        return RoundSnapshot(
            round_number=rnd.round_number,
            phase=rnd.phase,
            countdown=countdown,
            balance=self.ledger.balance,
            bets=dict(rnd.bets),
            total_wagered=self.bet_book.total_wagered(rnd),
            stake=self.stake,
            winner_id=rnd.winner_id,
            multiplier=rnd.multiplier,
            winnings=rnd.winnings,
            highlighted_id=self.highlighted_id,
            recent_results=self.recent_results.entries(),
            message=self.message,
            roster=list(self.roster),
        )

    # ---- phase transitions ----

    def _switch_timers(self) -> TimerGroup:
        if self._timers is not None:
            self._timers.cancel_all()
        self._timers = TimerGroup(self.scheduler)
        self._highlight_key = None
        return self._timers

    def _enter_betting(self) -> None:
        timers = self._switch_timers()
        rnd = self.round
        rnd.phase = Phase.BETTING
        rnd.betting_countdown = self.config.betting_countdown_seconds
        self.stake = None
        self.highlighted_id = None
        self.message = self._betting_message(rnd.betting_countdown)

        logger.info("Round %d: betting open for %ds", rnd.round_number, rnd.betting_countdown)
        self.events.emit_phase_changed(PhaseChanged(Phase.BETTING.value, rnd.betting_countdown))
        timers.every(TICK_SECONDS, self._on_betting_tick)

    def _on_betting_tick(self) -> None:
        rnd = self.round
        rnd.betting_countdown = max(0, rnd.betting_countdown - 1)
        self.events.emit_countdown_ticked(CountdownTicked(Phase.BETTING.value, rnd.betting_countdown))
        if rnd.betting_countdown == 0:
            self._enter_drawing()
        else:
            self.message = self._betting_message(rnd.betting_countdown)

    def _enter_drawing(self) -> None:
        timers = self._switch_timers()
        rnd = self.round
        rnd.phase = Phase.DRAWING
        if self.bet_book.total_wagered(rnd) == 0:
            self.message = "No bets placed. Finding winner..."
        else:
            self.message = "Bets placed! Finding winner..."
        self.stake = None
        rnd.luck_factor = self.selector.draw_luck_factor()
        self._highlight_index = 0

        logger.info(
            "Round %d: drawing, %s wagered",
            rnd.round_number,
            self.bet_book.total_wagered(rnd),
        )
        self.events.emit_phase_changed(PhaseChanged(Phase.DRAWING.value, 0))
        self._highlight_key = timers.every(
            self.config.highlight_interval_ms / 1000, self._on_highlight_tick
        )
        timers.after(self.config.draw_duration_ms / 1000, self._settle_winner)

    def _on_highlight_tick(self) -> None:
        competitor = self.roster[self._highlight_index % len(self.roster)]
        self._highlight_index += 1
        self.highlighted_id = competitor.id
        self.events.emit_highlight_tick(HighlightTick(competitor.id))

    def _settle_winner(self) -> None:
        rnd = self.round
        if self._highlight_key is not None:
            self._timers.cancel(self._highlight_key)
            self._highlight_key = None

        outcome = self.selector.select(rnd.luck_factor)
        rnd.winner_id = outcome.winner_id
        rnd.multiplier = outcome.multiplier
        self.highlighted_id = outcome.winner_id

        self.events.emit_winner_settled(WinnerSettled(outcome.winner_id))
        self._timers.after(self.config.settle_delay_ms / 1000, self._pay_out)

    def _pay_out(self) -> None:
        rnd = self.round
        rnd.winnings = self.payout.compute_payout(rnd, rnd.winner_id, rnd.multiplier)
        self._enter_resolved()

    def _enter_resolved(self) -> None:
        timers = self._switch_timers()
        rnd = self.round
        rnd.phase = Phase.RESOLVED
        rnd.next_round_countdown = self.config.next_round_countdown_seconds
        winner = self._by_id[rnd.winner_id]
        self.recent_results.record(winner.display_tag)

        if rnd.winnings > 0:
            self.message = (
                f"🎉 {winner.name} won! You won 💎{rnd.winnings:.2f} "
                f"with a {rnd.multiplier}x multiplier!"
            )
        else:
            self.message = (
                f"😔 {winner.name} won! You didn't bet on the winner. "
                "Better luck next time!"
            )

        logger.info(
            "Round %d: %s won at %sx, winnings %s, balance %s",
            rnd.round_number,
            winner.name,
            rnd.multiplier,
            rnd.winnings,
            self.ledger.balance,
        )
        self.events.emit_phase_changed(PhaseChanged(Phase.RESOLVED.value, rnd.next_round_countdown))
        self.events.emit_round_resolved(
            RoundResolved(rnd.winner_id, rnd.multiplier, rnd.winnings, self.ledger.balance)
        )
        if rnd.winnings > 0:
            self.events.emit_balance_changed(BalanceChanged(self.ledger.balance))
        timers.every(TICK_SECONDS, self._on_resolved_tick)

    def _on_resolved_tick(self) -> None:
        rnd = self.round
        rnd.next_round_countdown = max(0, rnd.next_round_countdown - 1)
        self.events.emit_countdown_ticked(CountdownTicked(Phase.RESOLVED.value, rnd.next_round_countdown))
        if rnd.next_round_countdown == 0:
            self._start_next_round()

    def _start_next_round(self) -> None:
        self.bet_book.reset(self.round)
        self.round = Round(round_number=self.round.round_number + 1)
        self._enter_betting()

    # ---- helpers ----

    def _require_phase(self, phase: Phase, message: str) -> None:
        if self.round.phase != phase:
            raise GameError(ErrorCode.INVALID_PHASE_FOR_ACTION, message)

    @staticmethod
    def _betting_message(seconds: int) -> str:
        return f"Place your bets! Race starts in {seconds} seconds..."
