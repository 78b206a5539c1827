"""Type definitions for the combat engine."""

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .conditions import ConditionEvaluator, adjust_ki_cost, adjust_outgoing_damage, floor_int
from .enums import AttackKind, ConditionName, Race
from .errors import InsufficientResource, UnknownAttackKind
from .events import StateChanged

if TYPE_CHECKING:
    from .events import EventBus

# Races that can always pay and never consume Ki
INFINITE_KI_RACES = frozenset({Race.ANDROID})


@dataclass
class BaseStats:
    """Static stats of a combatant, fixed at creation."""

    strength: int
    speed: int
    ki: int  # Max Ki
    vitality: int  # Max vitality

    def __post_init__(self) -> None:
        for name in ("strength", "speed", "ki", "vitality"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"Stat '{name}' must be a positive integer, got {value!r}")

    def with_override(self, override: dict[str, int] | None) -> "BaseStats":
        """Return a copy with some stats replaced."""
        if not override:
            return BaseStats(self.strength, self.speed, self.ki, self.vitality)
        unknown = set(override) - {"strength", "speed", "ki", "vitality"}
        if unknown:
            raise ValueError(f"Unknown stats in override: {sorted(unknown)}")
        values = {"strength": self.strength, "speed": self.speed, "ki": self.ki, "vitality": self.vitality}
        values.update(override)
        return BaseStats(**values)


@dataclass(frozen=True)
class StatBoost:
    """Multipliers an active effect puts on strength and speed."""

    strength: float = 1.0
    speed: float = 1.0


@dataclass(eq=False)
class Combatant:
    """Runtime state of a fighter during a session.

    Resources are only changed through the mutation methods, each of which
    re-derives the condition and emits StateChanged when it moves.
    """

    name: str
    race: Race
    stats: BaseStats
    description: str = ""
    bus: "EventBus | None" = field(default=None, repr=False)
    evaluator: ConditionEvaluator = field(default_factory=ConditionEvaluator, repr=False)
    level: int = 1

    # Active stat boosts by source, applied on read; base stats never change
    stat_boosts: dict[str, StatBoost] = field(default_factory=dict)

    # UI only: badge label -> remaining rounds (0 = no counter)
    status_tags: dict[str, int] = field(default_factory=dict)
    attack_labels: dict[AttackKind, str] = field(default_factory=dict)

    current_vitality: int = field(init=False)
    current_ki: int = field(init=False)
    condition: ConditionName = field(init=False, default=ConditionName.NORMAL)

    def __post_init__(self) -> None:
        self.current_vitality = self.stats.vitality
        self.current_ki = self.stats.ki
        self.condition = self._derive_condition()

    # --- Stats -------------------------------------------------------------

    @property
    def strength(self) -> int:
        return floor_int(self.stats.strength * math.prod(b.strength for b in self.stat_boosts.values()))

    @property
    def speed(self) -> int:
        return floor_int(self.stats.speed * math.prod(b.speed for b in self.stat_boosts.values()))

    @property
    def max_vitality(self) -> int:
        return self.stats.vitality

    @property
    def max_ki(self) -> int:
        return self.stats.ki

    @property
    def has_infinite_ki(self) -> bool:
        return self.race in INFINITE_KI_RACES

    def is_alive(self) -> bool:
        """Check if the combatant is still standing."""
        return self.current_vitality > 0

    def vitality_ratio(self) -> float:
        return self.current_vitality / self.max_vitality

    def set_level(self, level: int) -> None:
        self.level = max(1, int(level or 1))

    # --- Condition ---------------------------------------------------------

    def adjust_ki_cost(self, base_cost: int) -> int:
        return adjust_ki_cost(self.condition, base_cost)

    def adjust_outgoing_damage(self, base_damage: int) -> int:
        return adjust_outgoing_damage(self.condition, base_damage)

    def _derive_condition(self) -> ConditionName:
        return self.evaluator.evaluate(self.current_vitality, self.max_vitality, self.current_ki, self.max_ki)

    def _recompute_condition(self) -> None:
        previous = self.condition
        self.condition = self._derive_condition()
        if self.condition != previous and self.bus is not None:
            self.bus.emit(StateChanged(warrior=self.name, from_state=previous.value, to_state=self.condition.value))

    # --- Mutations ---------------------------------------------------------

    def receive_damage(self, amount: int) -> int:
        """Apply damage. Returns actual vitality lost."""
        damage = max(0, math.floor(amount))
        actual = min(self.current_vitality, damage)
        self.current_vitality -= actual
        self._recompute_condition()
        return actual

    def can_spend_ki(self, cost: int) -> bool:
        return self.has_infinite_ki or self.current_ki >= cost

    def spend_ki(self, cost: int) -> int:
        """Spend Ki. Returns the amount actually removed.

        Raises:
            InsufficientResource: if the combatant cannot pay the cost
        """
        if self.has_infinite_ki or cost <= 0:
            return 0
        if not self.can_spend_ki(cost):
            raise InsufficientResource(f"{self.name} does not have enough Ki ({self.current_ki}/{cost}).")
        self.current_ki -= math.floor(cost)
        self._recompute_condition()
        return math.floor(cost)

    def heal(self, amount: int) -> int:
        """Restore vitality up to max. Returns actual vitality restored."""
        if amount <= 0:
            return 0
        actual = min(self.max_vitality - self.current_vitality, math.floor(amount))
        self.current_vitality += actual
        self._recompute_condition()
        return actual

    def gain_ki(self, amount: int) -> int:
        """Restore Ki up to max. Returns actual Ki restored."""
        if amount <= 0:
            return 0
        actual = min(self.max_ki - self.current_ki, math.floor(amount))
        self.current_ki += actual
        self._recompute_condition()
        return actual

    def lose_ki(self, amount: int) -> int:
        """Remove Ki down to zero. Returns actual Ki removed."""
        if amount <= 0:
            return 0
        actual = min(self.current_ki, math.floor(amount))
        self.current_ki -= actual
        self._recompute_condition()
        return actual

    # --- Display bookkeeping -----------------------------------------------

    def add_status_tag(self, tag: str, remaining_rounds: int | None = None) -> None:
        if not tag:
            return
        self.status_tags[tag] = remaining_rounds or 0

    def update_status_tag(self, tag: str, remaining_rounds: int) -> None:
        if tag in self.status_tags:
            self.status_tags[tag] = remaining_rounds

    def remove_status_tag(self, tag: str) -> None:
        self.status_tags.pop(tag, None)

    def status_labels(self) -> list[str]:
        """Badges for display, e.g. ``"Super Saiyan (2r)"``."""
        return [f"{tag} ({rounds}r)" if rounds > 0 else tag for tag, rounds in self.status_tags.items()]

    def set_attack_labels(self, labels: dict[AttackKind | str, str] | None) -> None:
        """Merge display-label overrides into the current map."""
        if not labels:
            return
        for kind, label in labels.items():
            try:
                self.attack_labels[AttackKind(kind)] = label
            except ValueError:
                raise UnknownAttackKind(f"Unknown attack kind: {kind}") from None

    def attack_label(self, kind: AttackKind) -> str | None:
        return self.attack_labels.get(kind)

    def summary(self) -> str:
        s = self.stats
        return (
            f"[{self.race.value}] {self.name} - {self.description} | LVL: {self.level} | "
            f"STR: {s.strength} | KI: {s.ki} | SPD: {s.speed} | VIT: {s.vitality}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "race": self.race.value,
            "level": self.level,
            "strength": self.strength,
            "speed": self.speed,
            "current_vitality": self.current_vitality,
            "max_vitality": self.max_vitality,
            "current_ki": self.current_ki,
            "max_ki": self.max_ki,
            "condition": self.condition.value,
            "status_tags": dict(self.status_tags),
        }
