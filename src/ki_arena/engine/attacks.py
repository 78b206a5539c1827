"""Attack pipeline - turns "attacker acts on defender" into events and state changes.

Every attack runs the same sequence:
1. Refuse if either side is already down
2. Pay the (condition-adjusted) Ki cost
3. Compute damage from strength, then apply the attacker's condition
4. Dodge check (Normal and KiEnergy only)
5. Apply damage and emit AttackExecuted, then tick the attacker's effects
6. Emit BattleEnded if the defender went down

Special replaces steps 3-5: it passes the access gate, applies the race
effect and deals no damage.
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..config import Settings, get_settings
from .conditions import floor_int
from .effects import EffectTracker, create_effect
from .enums import AttackKind, Race
from .errors import ActionNotAllowed, UnknownAttackKind
from .events import AttackDodged, AttackExecuted, BattleEnded, GameEvent
from .types import Combatant

if TYPE_CHECKING:
    from .events import EventBus
    from .gate import SpecialAccessGate

logger = logging.getLogger(__name__)

KI_ENERGY_NAME_BY_RACE: dict[Race, str] = {
    Race.SAIYAN: "KI Energy (KAMEHAMEHA / FINAL FLASH)",
    Race.NAMEKIAN: "KI Energy (MAKANKOSAPPO)",
    Race.ANDROID: "KI Energy (LASER SHOT)",
}

SPECIAL_NAME_BY_RACE: dict[Race, str] = {
    Race.SAIYAN: "Super Saiyan",
    Race.NAMEKIAN: "Regeneration",
    Race.ANDROID: "Energy Leech",
}


@dataclass(frozen=True)
class AttackSpec:
    """Fixed numbers and naming for one attack kind."""

    kind: AttackKind
    ki_cost: int
    strength_multiplier: float
    dodgeable: bool
    name_for: Callable[[Race], str]


def build_attack_table(settings: Settings) -> dict[AttackKind, AttackSpec]:
    """Attack kinds keyed by kind, with numbers taken from settings."""
    return {
        AttackKind.NORMAL: AttackSpec(
            kind=AttackKind.NORMAL,
            ki_cost=settings.normal_ki_cost,
            strength_multiplier=settings.normal_strength_multiplier,
            dodgeable=True,
            name_for=lambda _race: settings.normal_attack_name,
        ),
        AttackKind.KI_ENERGY: AttackSpec(
            kind=AttackKind.KI_ENERGY,
            ki_cost=settings.ki_energy_ki_cost,
            strength_multiplier=settings.ki_energy_strength_multiplier,
            dodgeable=True,
            name_for=KI_ENERGY_NAME_BY_RACE.__getitem__,
        ),
        AttackKind.SPECIAL: AttackSpec(
            kind=AttackKind.SPECIAL,
            ki_cost=settings.special_ki_cost,
            strength_multiplier=0.0,
            dodgeable=False,
            name_for=SPECIAL_NAME_BY_RACE.__getitem__,
        ),
    }


@dataclass(frozen=True)
class AttackResult:
    """Read-only summary of a resolved attack."""

    attacker_name: str
    defender_name: str
    attack_name: str
    ki_spent: int
    damage_dealt: int
    defender_remaining_vitality: int
    attacker_remaining_ki: int
    attack_kind: AttackKind = AttackKind.NORMAL
    dodged: bool = False

    def to_line(self) -> str:
        if self.dodged:
            return f"{self.attacker_name} -> {self.attack_name} -> {self.defender_name} (Ki -{self.ki_spent}, dodged)"
        return (
            f"{self.attacker_name} -> {self.attack_name} -> {self.defender_name} "
            f"(Ki -{self.ki_spent}, Damage {self.damage_dealt}, Defender VIT {self.defender_remaining_vitality})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "attacker_name": self.attacker_name,
            "defender_name": self.defender_name,
            "attack_name": self.attack_name,
            "attack_kind": self.attack_kind.value,
            "ki_spent": self.ki_spent,
            "damage_dealt": self.damage_dealt,
            "defender_remaining_vitality": self.defender_remaining_vitality,
            "attacker_remaining_ki": self.attacker_remaining_ki,
            "dodged": self.dodged,
        }


def dodge_chance(speed: int, min_speed: int = 10, max_speed: int = 100, max_chance: float = 0.70) -> float:
    """Probability that a defender with this speed dodges.

    Zero at or below ``min_speed``, rising linearly to ``max_chance`` at
    ``max_speed`` and flat beyond it.
    """
    if speed <= min_speed:
        return 0.0
    if speed >= max_speed:
        return max_chance
    chance = max_chance * (speed - min_speed) / (max_speed - min_speed)
    return min(max(chance, 0.0), max_chance)


def parse_attack_kind(kind: AttackKind | str) -> AttackKind:
    """Resolve a kind from its value.

    Raises:
        UnknownAttackKind: if the value is not a known kind
    """
    try:
        return AttackKind(kind)
    except ValueError:
        raise UnknownAttackKind(f"Attack kind not registered: {kind}") from None


class AttackPipeline:
    """Resolves attacks between two combatants."""

    def __init__(
        self,
        bus: "EventBus | None" = None,
        gate: "SpecialAccessGate | None" = None,
        effects: EffectTracker | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            bus: Event bus receiving combat events
            gate: Access gate for the Special attack. Without one, Special
                is only subject to the dead-combatant check.
            effects: Tracker holding live status effects
            settings: Balance settings
            rng: Random source for dodge draws
        """
        self.settings = settings or get_settings()
        self.bus = bus
        self.gate = gate
        self.effects = effects if effects is not None else EffectTracker()
        self.rng = rng or random.Random()
        self.table = build_attack_table(self.settings)

    def spec_for(self, kind: AttackKind | str) -> AttackSpec:
        spec = self.table.get(parse_attack_kind(kind))
        if spec is None:
            raise UnknownAttackKind(f"Attack kind not registered: {kind}")
        return spec

    def available_kinds(self) -> list[AttackKind]:
        return list(self.table)

    def resolve_label(self, kind: AttackKind | str, attacker: Combatant) -> str:
        """Display name: the combatant's override, else the race default."""
        spec = self.spec_for(kind)
        return attacker.attack_label(spec.kind) or spec.name_for(attacker.race)

    def dodge_chance_for(self, defender: Combatant) -> float:
        return dodge_chance(
            defender.speed,
            min_speed=self.settings.dodge_min_speed,
            max_speed=self.settings.dodge_max_speed,
            max_chance=self.settings.dodge_max_chance,
        )

    def execute(self, kind: AttackKind | str, attacker: Combatant, defender: Combatant) -> AttackResult:
        """Run an attack.

        Args:
            kind: Attack kind to perform
            attacker: Combatant acting
            defender: Combatant receiving the attack

        Returns:
            AttackResult describing what happened

        Raises:
            ActionNotAllowed: if either combatant is already down
            InsufficientResource: if the attacker cannot pay the Ki cost
            SpecialNotUnlocked, SpecialAlreadyUsed, SpecialGateFailed: Special refused
            UnknownAttackKind: if the kind is not registered
        """
        spec = self.spec_for(kind)
        self._check_can_act(attacker, defender)

        if spec.kind == AttackKind.SPECIAL:
            return self._execute_special(spec, attacker, defender)

        ki_spent = self._pay_ki(spec, attacker)

        base_damage = floor_int(attacker.strength * spec.strength_multiplier)
        final_damage = attacker.adjust_outgoing_damage(base_damage)
        label = self.resolve_label(spec.kind, attacker)

        if spec.dodgeable and self.rng.random() < self.dodge_chance_for(defender):
            logger.debug("%s dodged %s from %s", defender.name, label, attacker.name)
            self._emit(
                AttackDodged(
                    attacker=attacker.name,
                    defender=defender.name,
                    attack_kind=spec.kind,
                    attack_name=label,
                    ki_spent=ki_spent,
                )
            )
            return AttackResult(
                attacker_name=attacker.name,
                defender_name=defender.name,
                attack_name=label,
                ki_spent=ki_spent,
                damage_dealt=0,
                defender_remaining_vitality=defender.current_vitality,
                attacker_remaining_ki=attacker.current_ki,
                attack_kind=spec.kind,
                dodged=True,
            )

        defender.receive_damage(final_damage)
        result = self._finish_attack(spec, label, attacker, defender, ki_spent, final_damage)

        if not defender.is_alive():
            logger.debug("%s defeated %s", attacker.name, defender.name)
            self._emit(BattleEnded(winner=attacker.name, loser=defender.name))
            self.effects.finish_for(attacker.name, defender.name)

        return result

    def _execute_special(self, spec: AttackSpec, attacker: Combatant, defender: Combatant) -> AttackResult:
        if self.gate is not None:
            self.gate.check(attacker)

        # Zero cost, paid through the same state-aware path
        ki_spent = self._pay_ki(spec, attacker)

        effect = create_effect(attacker, defender, self.settings, self.bus)
        effect.apply(self.effects)
        if self.gate is not None:
            self.gate.mark_used(attacker.name)

        label = self.resolve_label(spec.kind, attacker)
        return self._finish_attack(spec, label, attacker, defender, ki_spent, 0)

    def _finish_attack(
        self,
        spec: AttackSpec,
        label: str,
        attacker: Combatant,
        defender: Combatant,
        ki_spent: int,
        damage: int,
    ) -> AttackResult:
        """Emit AttackExecuted, tick the attacker's effects and build the result."""
        self._emit(
            AttackExecuted(
                attacker=attacker.name,
                defender=defender.name,
                attack_kind=spec.kind,
                attack_name=label,
                ki_spent=ki_spent,
                damage=damage,
                defender_remaining_vitality=defender.current_vitality,
                attacker_remaining_ki=attacker.current_ki,
            )
        )
        result = AttackResult(
            attacker_name=attacker.name,
            defender_name=defender.name,
            attack_name=label,
            ki_spent=ki_spent,
            damage_dealt=damage,
            defender_remaining_vitality=defender.current_vitality,
            attacker_remaining_ki=attacker.current_ki,
            attack_kind=spec.kind,
        )
        self.effects.step(attacker.name)
        logger.debug(result.to_line())
        return result

    def _pay_ki(self, spec: AttackSpec, attacker: Combatant) -> int:
        cost = attacker.adjust_ki_cost(spec.ki_cost)
        ki_before = attacker.current_ki
        attacker.spend_ki(cost)
        return max(0, ki_before - attacker.current_ki)

    @staticmethod
    def _check_can_act(attacker: Combatant, defender: Combatant) -> None:
        if not attacker.is_alive():
            raise ActionNotAllowed(f"{attacker.name} cannot act (down).")
        if not defender.is_alive():
            raise ActionNotAllowed(f"{defender.name} is already down.")

    def _emit(self, event: GameEvent) -> None:
        if self.bus is not None:
            self.bus.emit(event)
