"""Tests for the turn manager."""

import pytest
from conftest import kinds_of

from ki_arena.engine.turn import TurnManager


class TestTurnManager:
    """Tests for alternation and round counting."""

    def test_starts_with_first_fighter(self, make_combatant, bus, events):
        goku = make_combatant(name="Goku")
        vegeta = make_combatant(name="Vegeta")

        turns = TurnManager(goku, vegeta, bus=bus)

        assert turns.active is goku
        assert turns.opponent is vegeta
        assert turns.round_number == 1
        assert kinds_of(events) == ["BattleStarted"]

    def test_alternates(self, make_combatant):
        goku = make_combatant(name="Goku")
        vegeta = make_combatant(name="Vegeta")
        turns = TurnManager(goku, vegeta)

        seen = []
        for _ in range(4):
            seen.append(turns.active.name)
            turns.next_turn()

        assert seen == ["Goku", "Vegeta", "Goku", "Vegeta"]

    @pytest.mark.parametrize("rounds", [1, 2, 5])
    def test_two_turns_make_a_round(self, make_combatant, rounds):
        turns = TurnManager(make_combatant(name="Goku"), make_combatant(name="Vegeta"))

        for _ in range(2 * rounds):
            turns.next_turn()

        assert turns.round_number == 1 + rounds
        assert turns.active.name == "Goku"

    def test_turn_changed_payload(self, make_combatant, bus, events):
        turns = TurnManager(make_combatant(name="Goku"), make_combatant(name="Vegeta"), bus=bus)

        turns.next_turn()
        turns.next_turn()

        changes = events[1:]
        assert [(e.round_number, e.active, e.opponent) for e in changes] == [
            (1, "Vegeta", "Goku"),
            (2, "Goku", "Vegeta"),
        ]

    def test_needs_two_distinct_fighters(self, make_combatant):
        goku = make_combatant(name="Goku")
        with pytest.raises(ValueError):
            TurnManager(goku, goku)
