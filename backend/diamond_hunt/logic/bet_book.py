"""Per-round wager book."""
from typing import Iterable

from diamond_hunt.errors import ErrorCode, GameError
from diamond_hunt.logic.ledger import Ledger
from diamond_hunt.logic.models import Competitor, Phase, Round
from diamond_hunt.validators import validate_positive_amount


class BetBook:
    """Records wagers on a round, debiting the ledger as they are placed."""

    def __init__(self, ledger: Ledger, roster: Iterable[Competitor]):
        self.ledger = ledger
        self._known_ids = {c.id for c in roster}

    def place_wager(self, round_: Round, competitor_id: int, amount: float) -> float:
        """
        Place a wager and return the new total on that competitor.

        Checks run in order: phase, amount, competitor, affordability. The
        ledger is debited before the bet is recorded, so a rejected debit
        leaves the book untouched. Repeat wagers on one competitor accumulate.
        """
        if round_.phase != Phase.BETTING:
            raise GameError(
                ErrorCode.INVALID_PHASE_FOR_ACTION,
                f"Bets are closed while the round is {round_.phase.value}.",
            )
        validate_positive_amount(amount, "Wager")
        if competitor_id not in self._known_ids:
            raise GameError(
                ErrorCode.UNKNOWN_COMPETITOR,
                f"Unknown competitor {competitor_id}.",
            )

        self.ledger.debit(amount)
        new_total = round_.bets.get(competitor_id, 0.0) + amount
        round_.bets[competitor_id] = new_total
        return new_total

    def total_wagered(self, round_: Round) -> float:
        return sum(round_.bets.values())

    def reset(self, round_: Round) -> None:
        # Wagers are consumed, not refunded; the ledger is left alone.
        round_.bets.clear()
