"""Random sources for the outcome draw."""
import random
import secrets
from abc import ABC, abstractmethod


class RNGBase(ABC):
    """Abstract RNG interface; the engine only ever draws through this."""

    @abstractmethod
    def random(self) -> float:
        """Return random float in [0, 1)."""
        pass

    def uniform(self, a: float, b: float) -> float:
        """Return random float in [a, b)."""
        return a + (b - a) * self.random()


class ProductionRNG(RNGBase):
    """
    Production RNG.

    Uses the OS entropy source, no fixed seed.
    """

    def random(self) -> float:
        return secrets.randbelow(2**53) / (2**53)


class SeededRNG(RNGBase):
    """
    Test/Simulation RNG.

    Deterministic, fully controlled by seed.
    """

    def __init__(self, seed: int):
        self._rng = random.Random(seed)
        self.seed = seed

    def random(self) -> float:
        return self._rng.random()
