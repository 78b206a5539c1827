"""Tests for combatant creation, presets and the roster."""

import pytest
from pydantic import ValidationError

from ki_arena.engine.enums import AttackKind, Race
from ki_arena.engine.errors import UnknownCombatant, UnknownRace
from ki_arena.engine.roster import Roster, WarriorPreset, create_combatant

PRESETS = [
    {
        "id": "goku",
        "type": "Saiyan",
        "name": "Goku",
        "description": "Raised on Earth",
        "attackLabels": {"KiEnergy": "Kamehameha"},
        "spriteFrames": ["goku_idle.png"],
    },
    {"id": "piccolo", "type": "Namekian", "name": "Piccolo", "statsOverride": {"strength": 22}},
]


class TestCreateCombatant:
    """Tests for create_combatant."""

    @pytest.mark.parametrize(
        ("race", "stats"),
        [
            ("Saiyan", (20, 20, 100, 120)),
            ("Namekian", (18, 18, 110, 130)),
            ("Android", (16, 16, 9999, 100)),
        ],
    )
    def test_race_defaults(self, settings, race, stats):
        combatant = create_combatant(race, "Test", settings=settings)
        assert (combatant.strength, combatant.speed, combatant.max_ki, combatant.max_vitality) == stats

    def test_override(self, settings):
        combatant = create_combatant(Race.SAIYAN, "Gohan", stats_override={"vitality": 90}, settings=settings)
        assert combatant.max_vitality == 90
        assert combatant.current_vitality == 90
        assert combatant.strength == 20

    def test_unknown_race(self, settings):
        with pytest.raises(UnknownRace):
            create_combatant("Frieza Race", "Frieza", settings=settings)

    def test_thresholds_follow_settings(self, settings):
        settings.injured_vitality_ratio = 0.5
        combatant = create_combatant("Saiyan", "Goku", settings=settings)

        combatant.receive_damage(60)
        assert combatant.condition.value == "Injured"


class TestWarriorPreset:
    """Tests for the preset schema."""

    def test_aliases(self):
        preset = WarriorPreset.model_validate(PRESETS[0])

        assert preset.type == Race.SAIYAN
        assert preset.attack_labels == {AttackKind.KI_ENERGY: "Kamehameha"}
        assert preset.sprite_frames == ["goku_idle.png"]
        assert preset.stats_override is None

    def test_field_names_accepted(self):
        preset = WarriorPreset(id="v", type="Saiyan", name="Vegeta", stats_override={"speed": 25})
        assert preset.stats_override.speed == 25

    def test_invalid_race(self):
        with pytest.raises(ValidationError):
            WarriorPreset.model_validate({"id": "x", "type": "Human", "name": "Krillin"})

    def test_non_positive_override(self):
        with pytest.raises(ValidationError):
            WarriorPreset.model_validate({"id": "x", "type": "Saiyan", "name": "X", "statsOverride": {"ki": 0}})


class TestRoster:
    """Tests for the session roster."""

    def test_spawn_from_presets(self, bus, settings):
        roster = Roster(bus=bus, settings=settings)
        roster.load_presets(PRESETS)

        goku = roster.spawn("goku")
        piccolo = roster.spawn("piccolo")

        assert roster.get("Goku") is goku
        assert goku.attack_label(AttackKind.KI_ENERGY) == "Kamehameha"
        assert goku.description == "Raised on Earth"
        assert piccolo.strength == 22
        assert piccolo.bus is bus
        assert roster.names() == ["Goku", "Piccolo"]
        assert len(roster) == 2
        assert "Goku" in roster

    def test_unknown_preset(self, settings):
        roster = Roster(settings=settings)
        with pytest.raises(UnknownCombatant):
            roster.spawn("goku")

    def test_unknown_name(self, settings):
        roster = Roster(settings=settings)
        with pytest.raises(UnknownCombatant):
            roster.get("Nobody")

    def test_register_replaces(self, settings):
        roster = Roster(settings=settings)
        first = roster.create("Saiyan", "Goku")
        second = roster.create("Saiyan", "Goku")

        assert roster.get("Goku") is second
        assert roster.get("Goku") is not first
        assert roster.all() == [second]

    def test_load_presets_replaces(self, settings):
        roster = Roster(settings=settings)
        roster.load_presets(PRESETS)
        roster.load_presets([PRESETS[1]])

        with pytest.raises(UnknownCombatant):
            roster.spawn("goku")
