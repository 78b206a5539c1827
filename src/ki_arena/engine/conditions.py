"""Condition states - derived modifiers on outgoing damage and Ki cost."""

import math
from dataclasses import dataclass

from .enums import ConditionName


@dataclass(frozen=True)
class ConditionModifiers:
    """Multipliers applied while a combatant is in a given condition."""

    damage_multiplier: float
    ki_cost_multiplier: float


CONDITION_MODIFIERS: dict[ConditionName, ConditionModifiers] = {
    ConditionName.NORMAL: ConditionModifiers(damage_multiplier=1.0, ki_cost_multiplier=1.0),
    ConditionName.INJURED: ConditionModifiers(damage_multiplier=0.8, ki_cost_multiplier=1.0),
    ConditionName.EXHAUSTED: ConditionModifiers(damage_multiplier=0.9, ki_cost_multiplier=1.2),
    ConditionName.DEAD: ConditionModifiers(damage_multiplier=0.0, ki_cost_multiplier=1.0),
}


def floor_int(value: float) -> int:
    # 50 * 1.2 must give 60, not 59
    return math.floor(round(value, 9))


def adjust_outgoing_damage(condition: ConditionName, base: int) -> int:
    """Scale damage by the condition's multiplier, truncating."""
    return floor_int(base * CONDITION_MODIFIERS[condition].damage_multiplier)


def adjust_ki_cost(condition: ConditionName, base: int) -> int:
    """Scale a Ki cost by the condition's multiplier, truncating."""
    return floor_int(base * CONDITION_MODIFIERS[condition].ki_cost_multiplier)


class ConditionEvaluator:
    """Derives the condition of a combatant from its resource ratios."""

    def __init__(self, injured_vitality_ratio: float = 0.10, exhausted_ki_ratio: float = 0.10) -> None:
        self.injured_vitality_ratio = injured_vitality_ratio
        self.exhausted_ki_ratio = exhausted_ki_ratio

    def evaluate(self, vitality: int, max_vitality: int, ki: int, max_ki: int) -> ConditionName:
        """Evaluate the condition.

        Rules are checked in order: dead, then injured (low vitality), then
        exhausted (low Ki), otherwise normal.

        Args:
            vitality: Current vitality
            max_vitality: Maximum vitality (positive)
            ki: Current Ki
            max_ki: Maximum Ki (positive)

        Returns:
            The condition these resources put the combatant in
        """
        if vitality <= 0:
            return ConditionName.DEAD
        if vitality / max_vitality <= self.injured_vitality_ratio:
            return ConditionName.INJURED
        if ki / max_ki <= self.exhausted_ki_ratio:
            return ConditionName.EXHAUSTED
        return ConditionName.NORMAL
