"""Luck-weighted winner draw and bonus multiplier draw."""
from typing import Sequence

from diamond_hunt.config import Settings, settings
from diamond_hunt.logic.models import Competitor, Outcome
from diamond_hunt.logic.rng import ProductionRNG, RNGBase


# Multiplier chance slopes per unit of luck
LUCK_BONUS_SLOPE_POSITIVE = 0.10
LUCK_BONUS_SLOPE_NEGATIVE = 0.05


def compute_weights(
    roster: Sequence[Competitor],
    luck_factor: float,
    tilt: float = settings.luck_weight_tilt,
) -> list[float]:
    """
    Base weight 1/odds, scaled by (1 + luck * tilt).

    The same factor is applied to every competitor and the result is not
    renormalised. For luck in [-1, 1] and tilt 0.5 the factor stays in
    [0.5, 1.5], so every weight is strictly positive.
    """
    factor = 1 + luck_factor * tilt
    return [(1 / c.odds) * factor for c in roster]


def pick_weighted(roster: Sequence[Competitor], weights: Sequence[float], point: float) -> Competitor:
    """
    Walk the roster subtracting weights from point; first to reach <= 0 wins.

    Falls back to the last competitor when rounding residue leaves the
    remainder positive after the final subtraction.
    """
    remainder = point
    for competitor, weight in zip(roster, weights):
        remainder -= weight
        if remainder <= 0:
            return competitor
    return roster[-1]


def multiplier_chance(
    luck_factor: float,
    base: float = settings.base_multiplier_chance,
    floor: float = settings.multiplier_chance_floor,
    ceiling: float = settings.multiplier_chance_ceiling,
) -> float:
    """Bonus chance: base, raised by good luck, lowered by bad, clamped to [floor, ceiling]."""
    chance = base
    if luck_factor > 0:
        chance += luck_factor * LUCK_BONUS_SLOPE_POSITIVE
    elif luck_factor < 0:
        chance += luck_factor * LUCK_BONUS_SLOPE_NEGATIVE
    return max(floor, min(ceiling, chance))


class OutcomeSelector:
    """
    Picks the round winner and bonus multiplier.

    Draw order on the injected RNG is fixed: winner sample first, then the
    multiplier sample, so a scripted RNG reproduces an outcome exactly.
    """

    def __init__(
        self,
        roster: Sequence[Competitor],
        rng: RNGBase | None = None,
        config: Settings | None = None,
    ):
        if not roster:
            raise ValueError("roster must not be empty")
        self.roster = tuple(roster)
        self.rng = rng or ProductionRNG()
        self.config = config or settings

    def draw_luck_factor(self) -> float:
        return self.rng.uniform(-1.0, 1.0)

    def select(self, luck_factor: float) -> Outcome:
        cfg = self.config
        weights = compute_weights(self.roster, luck_factor, cfg.luck_weight_tilt)
        point = self.rng.uniform(0.0, sum(weights))
        winner = pick_weighted(self.roster, weights, point)

        chance = multiplier_chance(
            luck_factor,
            cfg.base_multiplier_chance,
            cfg.multiplier_chance_floor,
            cfg.multiplier_chance_ceiling,
        )
        multiplier = cfg.bonus_multiplier if self.rng.random() < chance else 1

        return Outcome(winner_id=winner.id, multiplier=multiplier)
