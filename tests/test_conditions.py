"""Tests for condition evaluation and modifiers."""

from ki_arena.engine.conditions import (
    ConditionEvaluator,
    adjust_ki_cost,
    adjust_outgoing_damage,
    floor_int,
)
from ki_arena.engine.enums import ConditionName


class TestConditionEvaluator:
    """Tests for ConditionEvaluator rule order."""

    def test_full_resources_is_normal(self):
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate(100, 100, 100, 100) == ConditionName.NORMAL

    def test_zero_vitality_is_dead(self):
        """Dead wins over every other rule."""
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate(0, 100, 0, 100) == ConditionName.DEAD

    def test_low_vitality_is_injured(self):
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate(10, 100, 100, 100) == ConditionName.INJURED
        assert evaluator.evaluate(11, 100, 100, 100) == ConditionName.NORMAL

    def test_injured_checked_before_exhausted(self):
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate(5, 100, 0, 100) == ConditionName.INJURED

    def test_low_ki_is_exhausted(self):
        evaluator = ConditionEvaluator()
        assert evaluator.evaluate(100, 100, 10, 100) == ConditionName.EXHAUSTED
        assert evaluator.evaluate(100, 100, 0, 100) == ConditionName.EXHAUSTED
        assert evaluator.evaluate(100, 100, 11, 100) == ConditionName.NORMAL

    def test_custom_thresholds(self):
        evaluator = ConditionEvaluator(injured_vitality_ratio=0.5, exhausted_ki_ratio=0.5)
        assert evaluator.evaluate(50, 100, 100, 100) == ConditionName.INJURED
        assert evaluator.evaluate(100, 100, 50, 100) == ConditionName.EXHAUSTED


class TestConditionModifiers:
    """Tests for damage and Ki cost adjustment per condition."""

    def test_normal_is_identity(self):
        assert adjust_outgoing_damage(ConditionName.NORMAL, 20) == 20
        assert adjust_ki_cost(ConditionName.NORMAL, 30) == 30

    def test_injured_reduces_damage(self):
        assert adjust_outgoing_damage(ConditionName.INJURED, 20) == 16
        assert adjust_ki_cost(ConditionName.INJURED, 30) == 30

    def test_exhausted_reduces_damage_and_raises_cost(self):
        assert adjust_outgoing_damage(ConditionName.EXHAUSTED, 20) == 18
        assert adjust_ki_cost(ConditionName.EXHAUSTED, 30) == 36
        assert adjust_ki_cost(ConditionName.EXHAUSTED, 50) == 60

    def test_dead_deals_nothing(self):
        assert adjust_outgoing_damage(ConditionName.DEAD, 50) == 0

    def test_truncates(self):
        assert adjust_outgoing_damage(ConditionName.INJURED, 21) == 16
        assert adjust_ki_cost(ConditionName.EXHAUSTED, 31) == 37


class TestFloorInt:
    """Tests for float truncation."""

    def test_float_noise_does_not_lose_a_point(self):
        assert floor_int(50 * 1.2) == 60
        assert floor_int(20 * 1.3) == 26

    def test_truncates_toward_floor(self):
        assert floor_int(29.99) == 29
        assert floor_int(30.0) == 30
