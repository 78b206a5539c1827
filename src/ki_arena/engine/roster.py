"""Combatant creation and the session roster.

Presets come from static data owned by the caller; only ``type``,
``statsOverride`` and ``attackLabels`` (plus identity) matter to the engine.
"""

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from ..config import Settings, get_settings
from .conditions import ConditionEvaluator
from .enums import AttackKind, Race
from .errors import UnknownCombatant, UnknownRace
from .types import BaseStats, Combatant

if TYPE_CHECKING:
    from .events import EventBus

logger = logging.getLogger(__name__)


class StatsOverride(BaseModel):
    """Partial override of a race's default stats."""

    strength: int | None = Field(default=None, gt=0)
    speed: int | None = Field(default=None, gt=0)
    ki: int | None = Field(default=None, gt=0)
    vitality: int | None = Field(default=None, gt=0)


class WarriorPreset(BaseModel):
    """Preset schema as shipped with the game data."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Unique preset id")
    type: Race = Field(description="Race of the warrior")
    name: str = Field(min_length=1, description="Display name, unique in a session")
    description: str = Field(default="", description="Flavor text")
    stats_override: StatsOverride | None = Field(default=None, alias="statsOverride")
    attack_labels: dict[AttackKind, str] | None = Field(default=None, alias="attackLabels")
    sprite_frames: list[str] | None = Field(default=None, alias="spriteFrames")  # Presentation only


def default_stats_for(race: Race, settings: Settings) -> BaseStats:
    """Default stats for a race, from settings."""
    table = {
        Race.SAIYAN: settings.saiyan_stats,
        Race.NAMEKIAN: settings.namekian_stats,
        Race.ANDROID: settings.android_stats,
    }
    stats = table.get(race)
    if stats is None:
        raise UnknownRace(f"Unknown warrior type: {race}")
    return BaseStats(strength=stats.strength, speed=stats.speed, ki=stats.ki, vitality=stats.vitality)


def create_combatant(
    race: Race | str,
    name: str,
    description: str = "",
    stats_override: dict[str, int] | None = None,
    attack_labels: dict[AttackKind | str, str] | None = None,
    bus: "EventBus | None" = None,
    settings: Settings | None = None,
) -> Combatant:
    """Build a combatant of the given race.

    Args:
        race: Race (or its value, e.g. "Saiyan")
        name: Display name
        description: Flavor text
        stats_override: Stats replacing the race defaults
        attack_labels: Display-label overrides per attack kind
        bus: Event bus for StateChanged events
        settings: Balance settings

    Returns:
        A fresh combatant at full vitality and Ki

    Raises:
        UnknownRace: if the race is not known
    """
    settings = settings or get_settings()
    try:
        race = Race(race)
    except ValueError:
        raise UnknownRace(f"Unknown warrior type: {race}") from None

    stats = default_stats_for(race, settings).with_override(stats_override)
    combatant = Combatant(
        name=name,
        race=race,
        stats=stats,
        description=description,
        bus=bus,
        evaluator=ConditionEvaluator(settings.injured_vitality_ratio, settings.exhausted_ki_ratio),
    )
    combatant.set_attack_labels(attack_labels)
    return combatant


class Roster:
    """Combatants registered in a session, keyed by name."""

    def __init__(self, bus: "EventBus | None" = None, settings: Settings | None = None) -> None:
        self.bus = bus
        self.settings = settings or get_settings()
        self._combatants: dict[str, Combatant] = {}
        self._presets: dict[str, WarriorPreset] = {}

    def register(self, combatant: Combatant) -> None:
        if combatant.name in self._combatants:
            logger.info("%s already exists. Replacing...", combatant.name)
        self._combatants[combatant.name] = combatant
        logger.info("Registered: %s", combatant.summary())

    def get(self, name: str) -> Combatant:
        combatant = self._combatants.get(name)
        if combatant is None:
            raise UnknownCombatant(f"No combatant named {name!r}")
        return combatant

    def all(self) -> list[Combatant]:
        return list(self._combatants.values())

    def names(self) -> list[str]:
        return list(self._combatants)

    def create(self, race: Race | str, name: str, description: str = "", **kwargs) -> Combatant:
        """Create a combatant wired to this session and register it."""
        combatant = create_combatant(race, name, description, bus=self.bus, settings=self.settings, **kwargs)
        self.register(combatant)
        return combatant

    def load_presets(self, presets: list[WarriorPreset | dict]) -> None:
        """Replace known presets. Raw dicts are validated against the schema."""
        self._presets.clear()
        for preset in presets:
            if not isinstance(preset, WarriorPreset):
                preset = WarriorPreset.model_validate(preset)
            self._presets[preset.id] = preset

    def spawn(self, preset_id: str) -> Combatant:
        """Create and register a combatant from a loaded preset."""
        preset = self._presets.get(preset_id)
        if preset is None:
            raise UnknownCombatant(f"Preset not found: {preset_id}")

        override = preset.stats_override.model_dump(exclude_none=True) if preset.stats_override else None
        return self.create(
            preset.type,
            preset.name,
            preset.description,
            stats_override=override,
            attack_labels=preset.attack_labels,
        )

    def __contains__(self, name: str) -> bool:
        return name in self._combatants

    def __len__(self) -> int:
        return len(self._combatants)
