"""Turn manager - strict two-party alternation and round counting."""

from typing import TYPE_CHECKING

from .events import BattleStarted, TurnChanged
from .types import Combatant

if TYPE_CHECKING:
    from .events import EventBus


class TurnManager:
    """Decides who acts and which round it is. Knows nothing about attacks.

    Order is A -> B -> A -> B. A round is shared by both fighters, so the
    counter moves once per full cycle.
    """

    def __init__(self, first: Combatant, second: Combatant, bus: "EventBus | None" = None) -> None:
        if first is second or first.name == second.name:
            raise ValueError("A battle needs two distinct combatants")
        self.fighters: tuple[Combatant, Combatant] = (first, second)
        self.bus = bus
        self.round_number = 1
        self.active_index = 0  # 0 = first, 1 = second

        if self.bus is not None:
            self.bus.emit(BattleStarted(p1=first.name, p2=second.name))

    @property
    def active(self) -> Combatant:
        return self.fighters[self.active_index]

    @property
    def opponent(self) -> Combatant:
        return self.fighters[1 - self.active_index]

    def next_turn(self) -> None:
        """Hand over to the other fighter and emit TurnChanged."""
        self.active_index = 1 - self.active_index
        if self.active_index == 0:
            self.round_number += 1

        if self.bus is not None:
            self.bus.emit(
                TurnChanged(
                    round_number=self.round_number,
                    active=self.active.name,
                    opponent=self.opponent.name,
                )
            )
