"""Pytest fixtures for backend tests."""
from typing import Any, Generator, Iterable

import pytest
from fastapi.testclient import TestClient

from diamond_hunt.config import Settings
from diamond_hunt.events import EventService
from diamond_hunt.logic.engine import RoundEngine
from diamond_hunt.logic.models import DEFAULT_ROSTER, Round
from diamond_hunt.logic.rng import RNGBase
from diamond_hunt.logic.scheduler import ManualScheduler
from diamond_hunt.main import app, get_engine


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (long simulations)"
    )


class ScriptedRNG(RNGBase):
    """
    RNG that replays a fixed sequence of samples in [0, 1].

    Falls back to `default` once the script runs out, so long scenarios
    only need to script the draws they care about.
    """

    def __init__(self, values: Iterable[float] = (), default: float = 0.5):
        self._values = list(values)
        self.default = default
        self.calls = 0

    def push(self, *values: float) -> None:
        self._values.extend(values)

    def random(self) -> float:
        self.calls += 1
        if self._values:
            return self._values.pop(0)
        return self.default


class RecordingEventSink:
    """Event sink that keeps every event for assertions."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))

    def named(self, event_name: str) -> list[dict[str, Any]]:
        return [data for name, data in self.events if name == event_name]

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def clear(self) -> None:
        self.events.clear()


# Luck sample 0.5 maps to luck factor 0.0
NEUTRAL_LUCK = 0.5
# Winner sample 0.0 always lands on the first competitor in roster order
FIRST_COMPETITOR = 0.0
# Winner sample just under 1.0 lands on the last competitor
LAST_COMPETITOR = 0.999999
# Multiplier sample above every possible chance: no bonus
NO_BONUS = 0.99
# Multiplier sample below the minimum chance: bonus applies
BONUS = 0.01


def script_round(rng: ScriptedRNG, winner: float, bonus: float, luck: float = NEUTRAL_LUCK) -> None:
    """Queue the three draws one round consumes: luck, winner, multiplier."""
    rng.push(luck, winner, bonus)


@pytest.fixture
def roster():
    return DEFAULT_ROSTER


@pytest.fixture
def betting_round() -> Round:
    return Round(round_number=1)


@pytest.fixture
def scripted_rng() -> ScriptedRNG:
    return ScriptedRNG()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def engine_settings() -> Settings:
    """Settings with the default timeline, independent of the environment."""
    return Settings(starting_balance=10000.0)


@pytest.fixture
def engine(
    scripted_rng: ScriptedRNG,
    scheduler: ManualScheduler,
    event_sink: RecordingEventSink,
    engine_settings: Settings,
) -> RoundEngine:
    """Started engine on a manual clock with scripted randomness."""
    round_engine = RoundEngine(
        rng=scripted_rng,
        scheduler=scheduler,
        events=EventService(event_sink),
        config=engine_settings,
    )
    round_engine.start()
    return round_engine


@pytest.fixture
def client_with_engine(engine: RoundEngine) -> Generator[TestClient, None, None]:
    """TestClient whose routes drive the manual-clock engine."""
    app.dependency_overrides[get_engine] = lambda: engine
    yield TestClient(app)
    app.dependency_overrides.pop(get_engine, None)
