"""In-memory save/restore of a battle's resources."""

from dataclasses import dataclass
from typing import Literal

from .types import Combatant

BattleContext = Literal["duel", "tournament", "campaign"]


@dataclass(frozen=True)
class FighterSnapshot:
    name: str
    vitality: int
    ki: int


@dataclass(frozen=True)
class BattleSnapshot:
    """Resources of both fighters at a point in a battle."""

    context: BattleContext
    p1: FighterSnapshot
    p2: FighterSnapshot
    active_name: str | None = None

    @classmethod
    def capture(
        cls,
        p1: Combatant,
        p2: Combatant,
        context: BattleContext = "duel",
        active_name: str | None = None,
    ) -> "BattleSnapshot":
        return cls(
            context=context,
            p1=FighterSnapshot(p1.name, p1.current_vitality, p1.current_ki),
            p2=FighterSnapshot(p2.name, p2.current_vitality, p2.current_ki),
            active_name=active_name,
        )

    def apply_to(self, p1: Combatant, p2: Combatant) -> bool:
        """Raise both fighters back up to the saved resources.

        Only heals and restores Ki; anything above the snapshot is kept.
        Returns False if the fighters do not match the snapshot.
        """
        if p1.name != self.p1.name or p2.name != self.p2.name:
            return False

        for fighter, saved in ((p1, self.p1), (p2, self.p2)):
            fighter.heal(max(0, saved.vitality - fighter.current_vitality))
            fighter.gain_ki(max(0, saved.ki - fighter.current_ki))
        return True
