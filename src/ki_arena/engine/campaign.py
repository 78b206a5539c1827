"""Campaign mode - fixed stages fought in order.

Each stage lists one or more opponents who are fought one after another.
Clearing every opponent of a stage completes it and unlocks the next one.
Progress is held in memory only.
"""

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CampaignStage:
    """A stage and its opponents, in fighting order."""

    id: int
    title: str
    opponents: tuple[str, ...]


DEFAULT_STAGES: tuple[CampaignStage, ...] = (
    CampaignStage(1, "Android 16", ("Android 16",)),
    CampaignStage(2, "Trunks", ("Trunks",)),
    CampaignStage(3, "A18 & A17", ("Android 18", "Android 17")),
    CampaignStage(4, "Piccolo & Gohan", ("Piccolo", "Gohan")),
    CampaignStage(5, "Goku & Vegeta", ("Goku", "Vegeta")),
)


class Campaign:
    """Stage progression for one player.

    Usage:
        campaign = Campaign()
        campaign.start_stage(0)
        opponent = campaign.current_opponent()
        # ... fight ...
        campaign.record_victory()
    """

    def __init__(self, stages: tuple[CampaignStage, ...] = DEFAULT_STAGES, player_name: str | None = None) -> None:
        if not stages:
            raise ValueError("A campaign needs at least one stage")
        self.stages = tuple(stages)
        self.player_name = player_name
        self.unlocked_until = 0
        self.completed = [False] * len(self.stages)
        self.active_stage: int | None = None
        self.opponent_index = 0

    def set_player_name(self, name: str | None) -> None:
        self.player_name = name or None

    def is_unlocked(self, index: int) -> bool:
        return 0 <= index <= self.unlocked_until

    def is_completed(self, index: int) -> bool:
        return 0 <= index < len(self.stages) and self.completed[index]

    def is_finished(self) -> bool:
        return all(self.completed)

    def complete_stage(self, index: int) -> None:
        """Mark a stage as cleared and unlock the next one.

        Raises:
            ValueError: on an unknown or still locked stage
        """
        self._check_playable(index)
        self.completed[index] = True
        if index + 1 < len(self.stages):
            self.unlocked_until = max(self.unlocked_until, index + 1)
        logger.info("Campaign stage %d (%s) completed", self.stages[index].id, self.stages[index].title)

    def reset(self, keep_player: bool = True) -> None:
        """Forget all progress."""
        if not keep_player:
            self.player_name = None
        self.unlocked_until = 0
        self.completed = [False] * len(self.stages)
        self.active_stage = None
        self.opponent_index = 0

    # --- Stage runs ---------------------------------------------------------

    def start_stage(self, index: int) -> CampaignStage:
        """Begin a stage from its first opponent.

        Raises:
            ValueError: on an unknown or still locked stage
        """
        self._check_playable(index)
        self.active_stage = index
        self.opponent_index = 0
        return self.stages[index]

    def current_opponent(self) -> str | None:
        """Next opponent of the running stage, or None when no stage runs."""
        if self.active_stage is None:
            return None
        return self.stages[self.active_stage].opponents[self.opponent_index]

    def record_victory(self) -> bool:
        """The player beat the current opponent.

        Returns:
            True if this cleared the stage
        """
        if self.active_stage is None:
            raise ValueError("No campaign stage in progress")
        self.opponent_index += 1
        if self.opponent_index < len(self.stages[self.active_stage].opponents):
            return False

        index = self.active_stage
        self.active_stage = None
        self.opponent_index = 0
        self.complete_stage(index)
        return True

    def record_defeat(self) -> None:
        """The player lost: the running stage is abandoned."""
        if self.active_stage is not None:
            logger.info("Campaign stage %d lost", self.stages[self.active_stage].id)
        self.active_stage = None
        self.opponent_index = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "player_name": self.player_name,
            "unlocked_until": self.unlocked_until,
            "completed": list(self.completed),
            "stages": [{"id": s.id, "title": s.title, "opponents": list(s.opponents)} for s in self.stages],
        }

    def _check_playable(self, index: int) -> None:
        if not 0 <= index < len(self.stages):
            raise ValueError(f"No campaign stage at index {index}")
        if not self.is_unlocked(index):
            raise ValueError(f"Campaign stage {self.stages[index].id} is locked")
