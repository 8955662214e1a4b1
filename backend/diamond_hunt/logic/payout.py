"""Winnings calculation."""
from typing import Sequence

from diamond_hunt.logic.ledger import Ledger
from diamond_hunt.logic.models import Competitor, Round


class PayoutCalculator:
    """Pays bet * odds * multiplier on the winner into the ledger."""

    def __init__(self, ledger: Ledger, roster: Sequence[Competitor]):
        self.ledger = ledger
        self._odds = {c.id: c.odds for c in roster}

    def compute_payout(self, round_: Round, winner_id: int, multiplier: int) -> float:
        """
        Credit winnings for the bet on the winner and return them.

        No bet on the winner means zero winnings and no ledger credit.
        """
        bet_on_winner = round_.bets.get(winner_id, 0.0)
        if bet_on_winner == 0:
            return 0.0

        winnings = bet_on_winner * self._odds[winner_id] * multiplier
        self.ledger.credit(winnings)
        return winnings
