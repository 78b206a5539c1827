"""Single-elimination tournament for eight entrants.

The bracket is three ordered rounds of 4, 2 and 1 matches. Winners of
matches ``2k`` and ``2k + 1`` meet in match ``k`` of the next round.
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .types import Combatant

logger = logging.getLogger(__name__)

TBD = "TBD"
ROUND_SIZES = (4, 2, 1)


@dataclass
class Match:
    """A single bracket match."""

    a: str = TBD
    b: str = TBD
    winner: str | None = None
    done: bool = False

    def is_ready(self) -> bool:
        """Both slots are seeded."""
        return self.a != TBD and self.b != TBD

    def involves(self, name: str) -> bool:
        return self.a == name or self.b == name

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {"a": self.a, "b": self.b}
        if self.winner is not None:
            result["winner"] = self.winner
        if self.done:
            result["done"] = True
        return result


@dataclass(frozen=True)
class MatchRef:
    """Position of a match in the bracket."""

    round_index: int
    match_index: int
    match: Match


def quick_resolve(a: Combatant, b: Combatant, rng: random.Random | None = None) -> str:
    """Pick a winner without playing the match.

    Higher ``strength + speed`` wins; an exact tie is a coin flip.
    """
    rating_a = a.strength + a.speed
    rating_b = b.strength + b.speed
    if rating_a == rating_b:
        return a.name if (rng or random).random() < 0.5 else b.name
    return a.name if rating_a > rating_b else b.name


class Tournament:
    """Bracket model: seeding, result reporting and advancement."""

    def __init__(self, all_names: list[str], rng: random.Random | None = None) -> None:
        self.all_names = list(all_names)
        self.rng = rng or random.Random()
        self.player_name: str | None = None
        self.rounds: list[list[Match]] = [[Match() for _ in range(size)] for size in ROUND_SIZES]

    def seed8(self, player_name: str) -> None:
        """Seed round 0 with the player and seven shuffled opponents."""
        names = [n for n in self.all_names if n != player_name]
        if len(names) < 7:
            raise ValueError(f"Need at least 7 opponents besides {player_name}, got {len(names)}")

        self.player_name = player_name
        self.rng.shuffle(names)
        pool = [player_name, *names[:7]]

        self.rounds = [
            [Match(a=pool[i], b=pool[i + 1]) for i in range(0, 8, 2)],
            [Match(), Match()],
            [Match()],
        ]
        logger.info("Tournament seeded for %s: %s", player_name, ", ".join(pool))

    def report(self, round_index: int, match_index: int, winner: str) -> None:
        """Record a result and move the winner into the next round.

        Raises:
            ValueError: on an unknown match, an unseeded or already decided
                match, or a winner who is not in the match
        """
        match = self.match_at(round_index, match_index)
        if match.done:
            raise ValueError(f"Match {round_index}/{match_index} is already decided")
        if not match.is_ready():
            raise ValueError(f"Match {round_index}/{match_index} is not seeded yet")
        if not match.involves(winner):
            raise ValueError(f"{winner} is not playing match {round_index}/{match_index}")

        match.winner = winner
        match.done = True

        if round_index >= len(self.rounds) - 1:
            logger.info("Tournament won by %s", winner)
            return

        next_match = self.rounds[round_index + 1][match_index // 2]
        if match_index % 2 == 0:
            next_match.a = winner
        else:
            next_match.b = winner

    def match_at(self, round_index: int, match_index: int) -> Match:
        """Look up a match by position.

        Raises:
            ValueError: if there is no match at that position
        """
        if not 0 <= round_index < len(self.rounds) or not 0 <= match_index < len(self.rounds[round_index]):
            raise ValueError(f"No match at round {round_index}, index {match_index}")
        return self.rounds[round_index][match_index]

    def is_finished(self) -> bool:
        final = self.rounds[-1][0]
        return final.done and final.winner is not None

    def winner(self) -> str | None:
        return self.rounds[-1][0].winner if self.is_finished() else None

    def next_player_match(self) -> MatchRef | None:
        """First undone, ready match involving the player."""
        for ref in self._iter_matches():
            if not ref.match.done and ref.match.is_ready() and ref.match.involves(self.player_name or ""):
                return ref
        return None

    def pending_non_player(self) -> list[MatchRef]:
        """Undone, ready matches without the player, for quick resolution."""
        return [
            ref
            for ref in self._iter_matches()
            if not ref.match.done and ref.match.is_ready() and not ref.match.involves(self.player_name or "")
        ]

    def resolve_pending(self, lookup: Callable[[str], Combatant]) -> list[MatchRef]:
        """Quick-resolve every non-player match that is ready, until none are.

        Args:
            lookup: Maps an entrant name to its combatant

        Returns:
            The matches resolved, in resolution order
        """
        resolved: list[MatchRef] = []
        pending = self.pending_non_player()
        while pending:
            for ref in pending:
                winner = quick_resolve(lookup(ref.match.a), lookup(ref.match.b), self.rng)
                self.report(ref.round_index, ref.match_index, winner)
                resolved.append(ref)
            pending = self.pending_non_player()
        return resolved

    def to_dict(self) -> list[list[dict[str, Any]]]:
        """Bracket shape read by renderers."""
        return [[match.to_dict() for match in matches] for matches in self.rounds]

    def _iter_matches(self):
        for round_index, matches in enumerate(self.rounds):
            for match_index, match in enumerate(matches):
                yield MatchRef(round_index, match_index, match)
