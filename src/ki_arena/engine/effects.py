"""Status effects - temporary modifiers granted by a Special.

An effect lasts a number of owner actions. The session owns an
EffectTracker holding the live effects; the attack pipeline steps it once
per executed attack, and force-finishes the fighters' effects when a battle ends.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, ClassVar

from ..config import Settings, get_settings
from .enums import EffectKind, Race
from .errors import UnknownRace
from .events import EffectEnded, EffectStarted, EffectTick
from .types import Combatant, StatBoost

if TYPE_CHECKING:
    from .events import EventBus


class StatusEffect:
    """Base class for effects attached to a combatant.

    Subclasses override the hooks:
        on_apply    - runs once when the effect starts
        on_tick     - runs on every counted owner action
        on_cleanup  - runs once when the effect ends
    """

    kind: ClassVar[EffectKind]
    label: ClassVar[str]

    def __init__(
        self,
        owner: Combatant,
        rounds: int,
        bus: "EventBus | None" = None,
        count_activation: bool = False,
    ) -> None:
        """Initialize the effect.

        Args:
            owner: Combatant carrying the effect
            rounds: Duration in owner actions
            bus: Event bus for lifecycle events
            count_activation: If False, the action that activated the effect
                does not consume a round
        """
        self.owner = owner
        self.remaining_rounds = max(0, int(rounds))
        self.total_rounds = self.remaining_rounds
        self.bus = bus
        self.finished = False
        self._ignore_next_action = not count_activation

    def apply(self, tracker: "EffectTracker | None" = None) -> None:
        """Start the effect: badge, EffectStarted, immediate hook, tracking."""
        self.owner.add_status_tag(self.label, self.remaining_rounds)
        self._emit(EffectStarted(who=self.owner.name, effect=self.kind, total_rounds=self.remaining_rounds))
        self.on_apply()
        if tracker is not None:
            tracker.add(self)

    def on_owner_action(self) -> None:
        """Consume one round for an action taken by the owner."""
        if self.finished:
            return
        if self._ignore_next_action:
            self._ignore_next_action = False
            return

        self.on_tick()
        self.remaining_rounds -= 1
        if self.remaining_rounds > 0:
            self.owner.update_status_tag(self.label, self.remaining_rounds)
            self._emit(EffectTick(who=self.owner.name, effect=self.kind, remaining_rounds=self.remaining_rounds))
        else:
            self.finish()

    def finish(self) -> None:
        """End the effect and undo anything it changed. Safe to call twice."""
        if self.finished:
            return
        self.finished = True
        self.owner.remove_status_tag(self.label)
        self.on_cleanup()
        self._emit(EffectEnded(who=self.owner.name, effect=self.kind))

    def on_apply(self) -> None:
        pass

    def on_tick(self) -> None:
        pass

    def on_cleanup(self) -> None:
        pass

    def _emit(self, event) -> None:
        if self.bus is not None:
            self.bus.emit(event)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} owner={self.owner.name!r} remaining={self.remaining_rounds}>"


class SuperSaiyanEffect(StatusEffect):
    """Boosts strength and speed while active."""

    kind = EffectKind.SUPER_SAIYAN
    label = "Super Saiyan"

    def __init__(
        self,
        owner: Combatant,
        rounds: int,
        strength_multiplier: float,
        speed_multiplier: float,
        bus: "EventBus | None" = None,
    ) -> None:
        super().__init__(owner, rounds, bus=bus)
        self.boost = StatBoost(strength=strength_multiplier, speed=speed_multiplier)

    def on_apply(self) -> None:
        self.owner.stat_boosts[self.label] = self.boost

    def on_cleanup(self) -> None:
        self.owner.stat_boosts.pop(self.label, None)


class RegenerationEffect(StatusEffect):
    """Restores Ki and vitality on each owner action."""

    kind = EffectKind.REGENERATION
    label = "Regeneration"

    def __init__(
        self,
        owner: Combatant,
        rounds: int,
        ki_per_tick: int,
        vitality_per_tick: int,
        bus: "EventBus | None" = None,
    ) -> None:
        super().__init__(owner, rounds, bus=bus)
        self.ki_per_tick = ki_per_tick
        self.vitality_per_tick = vitality_per_tick

    def on_tick(self) -> None:
        self.owner.gain_ki(self.ki_per_tick)
        self.owner.heal(self.vitality_per_tick)


class EnergyLeechEffect(StatusEffect):
    """Drains the target's Ki on each owner action."""

    kind = EffectKind.ENERGY_LEECH
    label = "Energy Leech"

    def __init__(
        self,
        owner: Combatant,
        target: Combatant,
        rounds: int,
        ki_per_tick: int,
        bus: "EventBus | None" = None,
    ) -> None:
        super().__init__(owner, rounds, bus=bus)
        self.target = target
        self.ki_per_tick = ki_per_tick

    def on_tick(self) -> None:
        if not self.target.is_alive():
            return
        self.target.lose_ki(self.ki_per_tick)


EffectFactory = Callable[[Combatant, Combatant, Settings, "EventBus | None"], StatusEffect]

EFFECT_FACTORIES: dict[Race, EffectFactory] = {
    Race.SAIYAN: lambda owner, _target, s, bus: SuperSaiyanEffect(
        owner,
        s.effect_default_rounds,
        strength_multiplier=s.super_saiyan_strength_multiplier,
        speed_multiplier=s.super_saiyan_speed_multiplier,
        bus=bus,
    ),
    Race.NAMEKIAN: lambda owner, _target, s, bus: RegenerationEffect(
        owner,
        s.effect_default_rounds,
        ki_per_tick=s.regen_ki_per_tick,
        vitality_per_tick=s.regen_vitality_per_tick,
        bus=bus,
    ),
    Race.ANDROID: lambda owner, target, s, bus: EnergyLeechEffect(
        owner,
        target,
        s.effect_default_rounds,
        ki_per_tick=s.leech_ki_per_tick,
        bus=bus,
    ),
}


def create_effect(
    owner: Combatant,
    target: Combatant,
    settings: Settings | None = None,
    bus: "EventBus | None" = None,
) -> StatusEffect:
    """Build the Special effect for the owner's race.

    Raises:
        UnknownRace: if no effect is registered for the race
    """
    factory = EFFECT_FACTORIES.get(owner.race)
    if factory is None:
        raise UnknownRace(f"No special effect registered for race: {owner.race}")
    return factory(owner, target, settings or get_settings(), bus)


class EffectTracker:
    """Live effects of a session, stepped explicitly by the attack pipeline."""

    def __init__(self) -> None:
        self._effects: list[StatusEffect] = []

    def add(self, effect: StatusEffect) -> None:
        if effect not in self._effects:
            self._effects.append(effect)

    def step(self, attacker_name: str) -> None:
        """Tick every effect owned by the combatant that just acted."""
        for effect in list(self._effects):
            if effect.owner.name == attacker_name:
                effect.on_owner_action()
        self._prune()

    def finish_all(self) -> None:
        """Force-finish every live effect (battle over)."""
        for effect in list(self._effects):
            effect.finish()
        self._effects.clear()

    def finish_for(self, *names: str) -> None:
        """Force-finish the effects owned by the given combatants."""
        for effect in list(self._effects):
            if effect.owner.name in names:
                effect.finish()
        self._prune()

    def active_for(self, name: str) -> list[StatusEffect]:
        return [e for e in self._effects if e.owner.name == name and not e.finished]

    def _prune(self) -> None:
        self._effects = [e for e in self._effects if not e.finished]

    def __len__(self) -> int:
        return len(self._effects)

    def __iter__(self):
        return iter(list(self._effects))
