"""Payout tests: winnings = bet * odds * multiplier, credited to the ledger."""
import pytest

from diamond_hunt.logic.ledger import Ledger
from diamond_hunt.logic.payout import PayoutCalculator


@pytest.fixture
def ledger() -> Ledger:
    return Ledger(1000)


@pytest.fixture
def calculator(ledger, roster) -> PayoutCalculator:
    return PayoutCalculator(ledger, roster)


class TestComputePayout:
    """Tests for PayoutCalculator.compute_payout."""

    @pytest.mark.parametrize(
        "winner_id, bet, multiplier, expected",
        [
            (1, 50, 1, 250.0),    # Rabbit 5x
            (1, 50, 4, 1000.0),
            (6, 2, 1, 30.0),      # Panda 15x
            (8, 1, 4, 180.0),     # Lion 45x
            (5, 2.5, 1, 25.0),    # Dolphin 10x, fractional bet
        ],
    )
    def test_winnings_exact(self, calculator, ledger, betting_round, winner_id, bet, multiplier, expected):
        """Winnings are exactly bet * odds * multiplier and credited."""
        betting_round.bets[winner_id] = bet
        winnings = calculator.compute_payout(betting_round, winner_id, multiplier)
        assert winnings == expected
        assert ledger.balance == 1000 + expected

    def test_no_bet_on_winner_pays_nothing(self, calculator, ledger, betting_round):
        """No bet on the winner means no credit."""
        betting_round.bets[2] = 500
        winnings = calculator.compute_payout(betting_round, 1, 4)
        assert winnings == 0
        assert ledger.balance == 1000

    def test_zero_entry_pays_nothing(self, calculator, ledger, betting_round):
        """A zero entry on the winner pays nothing."""
        betting_round.bets[1] = 0
        assert calculator.compute_payout(betting_round, 1, 1) == 0
        assert ledger.balance == 1000

    def test_only_winner_bet_counts(self, calculator, ledger, betting_round):
        """Bets on losing competitors are ignored."""
        betting_round.bets.update({1: 50, 2: 50, 8: 50})
        assert calculator.compute_payout(betting_round, 2, 1) == 250
        assert ledger.balance == 1250
