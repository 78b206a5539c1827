"""Shared fixtures for engine tests."""

import random

import pytest

from ki_arena.config import Settings
from ki_arena.engine.duel import GameSession
from ki_arena.engine.events import EventBus, GameEvent
from ki_arena.engine.roster import create_combatant


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


# 0.99 is above the highest dodge chance, 0.0 dodges whenever the chance is positive
NEVER_DODGE = 0.99
ALWAYS_DODGE = 0.0


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def events(bus: EventBus) -> list[GameEvent]:
    """Every event emitted on the bus, in order."""
    received: list[GameEvent] = []
    bus.subscribe(received.append)
    return received


@pytest.fixture
def make_combatant(bus, settings):
    """Factory for combatants wired to the test bus."""

    def _make(race: str = "Saiyan", name: str = "Goku", **stats_override):
        return create_combatant(race, name, stats_override=stats_override or None, bus=bus, settings=settings)

    return _make


@pytest.fixture
def session(settings) -> GameSession:
    """Session whose attacks never get dodged."""
    return GameSession(settings=settings, rng=FixedRandom(NEVER_DODGE))


@pytest.fixture
def session_events(session: GameSession) -> list[GameEvent]:
    received: list[GameEvent] = []
    session.bus.subscribe(received.append)
    return received


def kinds_of(events: list[GameEvent]) -> list[str]:
    """Event kind values, for sequence assertions."""
    return [e.kind.value for e in events]
