"""Game events and the synchronous event bus.

Events are immutable records of something the engine did. The bus delivers
them to every listener in registration order; a failing listener is logged
and skipped so delivery and the emitting operation both carry on.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar

from .enums import AttackKind, EffectKind, EventKind

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True, kw_only=True)
class GameEvent:
    """Base class for all events."""

    kind: ClassVar[EventKind]
    timestamp: int = field(default_factory=now_ms)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, (AttackKind, EffectKind)):
                data[key] = value.value
        return {"kind": self.kind.value, **data}


# =============================================================================
# Combat
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class AttackExecuted(GameEvent):
    kind: ClassVar[EventKind] = EventKind.ATTACK_EXECUTED

    attacker: str
    defender: str
    attack_kind: AttackKind
    attack_name: str
    ki_spent: int
    damage: int
    defender_remaining_vitality: int
    attacker_remaining_ki: int


@dataclass(frozen=True, kw_only=True)
class AttackDodged(GameEvent):
    kind: ClassVar[EventKind] = EventKind.ATTACK_DODGED

    attacker: str
    defender: str
    attack_kind: AttackKind
    attack_name: str
    ki_spent: int


@dataclass(frozen=True, kw_only=True)
class StateChanged(GameEvent):
    kind: ClassVar[EventKind] = EventKind.STATE_CHANGED

    warrior: str
    from_state: str
    to_state: str


# =============================================================================
# Battle lifecycle
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class TurnChanged(GameEvent):
    kind: ClassVar[EventKind] = EventKind.TURN_CHANGED

    round_number: int  # Shared by both fighters
    active: str
    opponent: str


@dataclass(frozen=True, kw_only=True)
class BattleStarted(GameEvent):
    kind: ClassVar[EventKind] = EventKind.BATTLE_STARTED

    p1: str
    p2: str


@dataclass(frozen=True, kw_only=True)
class BattleEnded(GameEvent):
    kind: ClassVar[EventKind] = EventKind.BATTLE_ENDED

    winner: str
    loser: str


# =============================================================================
# Status effects
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class EffectStarted(GameEvent):
    kind: ClassVar[EventKind] = EventKind.EFFECT_STARTED

    who: str
    effect: EffectKind
    total_rounds: int


@dataclass(frozen=True, kw_only=True)
class EffectTick(GameEvent):
    kind: ClassVar[EventKind] = EventKind.EFFECT_TICK

    who: str
    effect: EffectKind
    remaining_rounds: int


@dataclass(frozen=True, kw_only=True)
class EffectEnded(GameEvent):
    kind: ClassVar[EventKind] = EventKind.EFFECT_ENDED

    who: str
    effect: EffectKind


Listener = Callable[[GameEvent], None]


class EventBus:
    """Publish/subscribe channel shared by every component of a session.

    Usage:
        bus = EventBus()
        bus.subscribe(print)
        bus.emit(BattleStarted(p1="Goku", p2="Vegeta"))
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        """Register a listener. Subscribing twice has no effect."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        """Remove a listener if present."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: GameEvent) -> None:
        """Deliver an event to all current listeners, in registration order."""
        # Listeners may (un)subscribe while we iterate
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Event listener %r failed on %s", listener, event.kind.value)

    def __len__(self) -> int:
        return len(self._listeners)
