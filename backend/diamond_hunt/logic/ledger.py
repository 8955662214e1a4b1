"""Player balance."""
from diamond_hunt.errors import ErrorCode, GameError
from diamond_hunt.validators import validate_credit_amount, validate_positive_amount


class Ledger:
    """
    Holds the player's balance.

    Debits are admission-controlled: a debit that would overdraw is
    rejected, never clamped, so the balance cannot go below zero.
    """

    def __init__(self, balance: float = 0.0):
        validate_credit_amount(balance)
        self._balance = float(balance)

    @property
    def balance(self) -> float:
        return self._balance

    def debit(self, amount: float) -> float:
        """Subtract amount; raises INSUFFICIENT_FUNDS if it exceeds the balance."""
        validate_positive_amount(amount)
        if amount > self._balance:
            raise GameError(
                ErrorCode.INSUFFICIENT_FUNDS,
                "Not enough balance for this bet!",
            )
        self._balance -= amount
        return self._balance

    def credit(self, amount: float) -> float:
        """Add amount (payouts and top-ups)."""
        validate_credit_amount(amount)
        self._balance += amount
        return self._balance
