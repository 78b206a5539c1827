"""Access rules for the Special attack.

The gate is the only place these thresholds are checked; display code asks
``can_use_special`` instead of repeating them.
"""

import logging
from typing import TYPE_CHECKING

from ..config import Settings, get_settings
from .errors import SpecialAlreadyUsed, SpecialGateFailed, SpecialNotUnlocked
from .events import BattleStarted, GameEvent, TurnChanged
from .types import Combatant

if TYPE_CHECKING:
    from .events import EventBus

logger = logging.getLogger(__name__)


class SpecialAccessGate:
    """Guards the Special attack with round, once-per-battle and resource checks.

    When attached to a bus, the gate follows the round counter from
    TurnChanged events and forgets who used their Special on BattleStarted.
    """

    def __init__(self, settings: Settings | None = None, bus: "EventBus | None" = None) -> None:
        settings = settings or get_settings()
        self.unlock_round = settings.special_unlock_round
        self.required_ki = settings.special_required_ki
        self.low_health_ratio = settings.special_low_health_ratio
        self.current_round = 1
        self._used: set[str] = set()
        if bus is not None:
            bus.subscribe(self.on_event)

    def on_event(self, event: GameEvent) -> None:
        match event:
            case TurnChanged(round_number=round_number):
                self.current_round = round_number
            case BattleStarted():
                self.current_round = 1
                self._used.clear()

    def check(self, combatant: Combatant) -> None:
        """Run every precondition, in order.

        Raises:
            SpecialNotUnlocked: before the unlock round
            SpecialAlreadyUsed: if the combatant already used it this battle
            SpecialGateFailed: if neither the Ki nor the low-health requirement holds
        """
        if self.current_round < self.unlock_round:
            logger.info("Special refused for %s: round %d", combatant.name, self.current_round)
            raise SpecialNotUnlocked(f"Special is available from round {self.unlock_round}.")

        if combatant.name in self._used:
            logger.info("Special refused for %s: already used", combatant.name)
            raise SpecialAlreadyUsed(f"{combatant.name} has already used their Special this battle.")

        if not self.meets_resource_requirement(combatant):
            logger.info(
                "Special refused for %s: Ki %d, vitality %d",
                combatant.name,
                combatant.current_ki,
                combatant.current_vitality,
            )
            pct = round(self.low_health_ratio * 100)
            raise SpecialGateFailed(f"Special requires at least {self.required_ki} Ki or health at or below {pct}%.")

    def meets_resource_requirement(self, combatant: Combatant) -> bool:
        ki_ok = combatant.current_ki >= self.required_ki
        low_health = combatant.vitality_ratio() <= self.low_health_ratio
        return ki_ok or low_health

    def can_use_special(self, combatant: Combatant) -> bool:
        """Non-raising version of ``check`` for menus and AI."""
        return (
            self.current_round >= self.unlock_round
            and combatant.name not in self._used
            and self.meets_resource_requirement(combatant)
        )

    def has_used_special(self, name: str) -> bool:
        return name in self._used

    def mark_used(self, name: str) -> None:
        self._used.add(name)
