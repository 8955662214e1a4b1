"""Amount validators shared by the ledger and the round engine."""
import math

from diamond_hunt.errors import ErrorCode, GameError


def validate_positive_amount(amount: float, label: str = "Amount") -> None:
    """
    Validate a wager, stake or top-up amount.

    Raises INVALID_AMOUNT if amount is non-finite or not strictly positive.
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise GameError(ErrorCode.INVALID_AMOUNT, f"{label} must be a number.")
    if not math.isfinite(amount) or amount <= 0:
        raise GameError(
            ErrorCode.INVALID_AMOUNT,
            f"{label} must be a positive finite number, got {amount}.",
        )


def validate_credit_amount(amount: float) -> None:
    """Credits may be zero but never negative or non-finite."""
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise GameError(ErrorCode.INVALID_AMOUNT, "Credit must be a number.")
    if not math.isfinite(amount) or amount < 0:
        raise GameError(
            ErrorCode.INVALID_AMOUNT,
            f"Credit must be a non-negative finite number, got {amount}.",
        )


def validate_stake(amount: float, stake_values: list[float]) -> None:
    """
    Validate a stake selection.

    Raises INVALID_AMOUNT if amount is not one of the offered stake values.
    """
    validate_positive_amount(amount, "Stake")
    if amount not in stake_values:
        raise GameError(
            ErrorCode.INVALID_AMOUNT,
            f"Stake {amount} not offered. Allowed: {stake_values}",
        )
