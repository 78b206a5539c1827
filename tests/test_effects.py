"""Tests for status effects and the effect tracker."""

import pytest
from conftest import kinds_of

from ki_arena.engine.effects import (
    EffectTracker,
    EnergyLeechEffect,
    RegenerationEffect,
    SuperSaiyanEffect,
    create_effect,
)
from ki_arena.engine.enums import AttackKind, EffectKind


class TestSuperSaiyan:
    """Tests for the Saiyan effect."""

    def test_boost_and_restore(self, make_combatant, bus):
        goku = make_combatant()
        tracker = EffectTracker()
        effect = SuperSaiyanEffect(goku, 2, strength_multiplier=1.3, speed_multiplier=1.2, bus=bus)

        effect.apply(tracker)
        assert goku.strength == 26
        assert goku.speed == 24
        assert goku.status_labels() == ["Super Saiyan (2r)"]

        tracker.step("Goku")  # The activating action
        tracker.step("Goku")
        assert goku.strength == 26
        assert goku.status_tags["Super Saiyan"] == 1

        tracker.step("Goku")
        assert goku.strength == 20
        assert goku.speed == 20
        assert goku.status_tags == {}
        assert len(tracker) == 0

    def test_event_sequence(self, make_combatant, bus, events):
        goku = make_combatant()
        tracker = EffectTracker()
        SuperSaiyanEffect(goku, 2, strength_multiplier=1.3, speed_multiplier=1.2, bus=bus).apply(tracker)

        for _ in range(3):
            tracker.step("Goku")

        assert kinds_of(events) == ["EffectStarted", "EffectTick", "EffectEnded"]
        assert events[0].total_rounds == 2
        assert events[1].remaining_rounds == 1

    def test_boosted_attacks(self, session):
        """The activation does not count; the next two attacks are boosted."""
        goku = session.roster.create("Saiyan", "Goku")
        target = session.roster.create("Namekian", "Piccolo", stats_override={"vitality": 1000})
        session.gate.current_round = 3

        session.pipeline.execute(AttackKind.SPECIAL, goku, target)
        goku.gain_ki(100)
        first = session.pipeline.execute(AttackKind.NORMAL, goku, target)
        goku.gain_ki(100)
        second = session.pipeline.execute(AttackKind.NORMAL, goku, target)
        goku.gain_ki(100)
        third = session.pipeline.execute(AttackKind.NORMAL, goku, target)

        assert [first.damage_dealt, second.damage_dealt, third.damage_dealt] == [26, 26, 20]


class TestRegeneration:
    """Tests for the Namekian effect."""

    def test_restores_each_tick(self, make_combatant, bus):
        piccolo = make_combatant("Namekian", "Piccolo")
        piccolo.receive_damage(50)
        piccolo.lose_ki(50)
        tracker = EffectTracker()
        RegenerationEffect(piccolo, 2, ki_per_tick=12, vitality_per_tick=12, bus=bus).apply(tracker)

        tracker.step("Piccolo")
        assert piccolo.current_vitality == 80
        assert piccolo.current_ki == 60

        tracker.step("Piccolo")
        assert piccolo.current_vitality == 92
        assert piccolo.current_ki == 72

        tracker.step("Piccolo")
        assert piccolo.current_vitality == 104
        assert piccolo.current_ki == 84
        assert len(tracker) == 0

    def test_caps_at_max(self, make_combatant, bus):
        piccolo = make_combatant("Namekian", "Piccolo")
        piccolo.receive_damage(5)
        tracker = EffectTracker()
        RegenerationEffect(piccolo, 2, ki_per_tick=12, vitality_per_tick=12, bus=bus).apply(tracker)

        tracker.step("Piccolo")
        tracker.step("Piccolo")
        assert piccolo.current_vitality == piccolo.max_vitality
        assert piccolo.current_ki == piccolo.max_ki


class TestEnergyLeech:
    """Tests for the Android effect."""

    def test_drains_target(self, make_combatant, bus):
        android = make_combatant("Android", "Android 18")
        goku = make_combatant()
        tracker = EffectTracker()
        EnergyLeechEffect(android, goku, 2, ki_per_tick=12, bus=bus).apply(tracker)

        tracker.step("Android 18")
        assert goku.current_ki == 100

        tracker.step("Android 18")
        tracker.step("Android 18")
        assert goku.current_ki == 76

    def test_dead_target_is_left_alone(self, make_combatant, bus):
        android = make_combatant("Android", "Android 18")
        goku = make_combatant()
        tracker = EffectTracker()
        EnergyLeechEffect(android, goku, 2, ki_per_tick=12, bus=bus).apply(tracker)
        goku.receive_damage(1000)

        tracker.step("Android 18")
        tracker.step("Android 18")
        assert goku.current_ki == 100

    def test_only_owner_actions_count(self, make_combatant, bus):
        android = make_combatant("Android", "Android 18")
        goku = make_combatant()
        tracker = EffectTracker()
        EnergyLeechEffect(android, goku, 2, ki_per_tick=12, bus=bus).apply(tracker)

        tracker.step("Goku")
        tracker.step("Goku")
        assert goku.current_ki == 100
        assert len(tracker.active_for("Android 18")) == 1


class TestEffectFactory:
    """Tests for race to effect mapping."""

    @pytest.mark.parametrize(
        ("race", "expected"),
        [
            ("Saiyan", EffectKind.SUPER_SAIYAN),
            ("Namekian", EffectKind.REGENERATION),
            ("Android", EffectKind.ENERGY_LEECH),
        ],
    )
    def test_effect_per_race(self, make_combatant, settings, race, expected):
        owner = make_combatant(race, "Owner")
        target = make_combatant("Saiyan", "Target")

        effect = create_effect(owner, target, settings)

        assert effect.kind == expected
        assert effect.remaining_rounds == settings.effect_default_rounds


class TestEffectTracker:
    """Tests for the live effect list."""

    def test_finish_all(self, make_combatant, bus, events):
        goku = make_combatant()
        tracker = EffectTracker()
        SuperSaiyanEffect(goku, 2, strength_multiplier=1.3, speed_multiplier=1.2, bus=bus).apply(tracker)

        tracker.finish_all()

        assert goku.strength == 20
        assert goku.status_tags == {}
        assert len(tracker) == 0
        assert kinds_of(events) == ["EffectStarted", "EffectEnded"]

    def test_finish_for_named_owners(self, make_combatant, bus):
        goku = make_combatant(name="Goku")
        vegeta = make_combatant(name="Vegeta")
        tracker = EffectTracker()
        SuperSaiyanEffect(goku, 2, strength_multiplier=1.3, speed_multiplier=1.2, bus=bus).apply(tracker)
        SuperSaiyanEffect(vegeta, 2, strength_multiplier=1.3, speed_multiplier=1.2, bus=bus).apply(tracker)

        tracker.finish_for("Goku", "Piccolo")

        assert goku.strength == 20
        assert vegeta.strength == 26
        assert [e.owner for e in tracker] == [vegeta]

    def test_killing_blow_spares_other_fighters(self, session):
        goku = session.roster.create("Saiyan", "Goku")
        piccolo = session.roster.create("Namekian", "Piccolo", stats_override={"vitality": 20})
        vegeta = session.roster.create("Saiyan", "Vegeta")
        bystander = SuperSaiyanEffect(vegeta, 2, strength_multiplier=1.3, speed_multiplier=1.2, bus=session.bus)
        bystander.apply(session.effects)

        session.pipeline.execute(AttackKind.NORMAL, goku, piccolo)

        assert not piccolo.is_alive()
        assert not bystander.finished
        assert vegeta.strength == 26

    def test_finish_is_idempotent(self, make_combatant, bus, events):
        goku = make_combatant()
        effect = SuperSaiyanEffect(goku, 2, strength_multiplier=1.3, speed_multiplier=1.2, bus=bus)
        effect.apply()

        effect.finish()
        effect.finish()
        effect.on_owner_action()

        assert kinds_of(events) == ["EffectStarted", "EffectEnded"]

    def test_add_once(self, make_combatant):
        goku = make_combatant()
        tracker = EffectTracker()
        effect = SuperSaiyanEffect(goku, 2, strength_multiplier=1.3, speed_multiplier=1.2)

        tracker.add(effect)
        tracker.add(effect)
        assert list(tracker) == [effect]
