"""Session and battle orchestration.

GameSession owns and wires the shared pieces of a running game: one event
bus, the roster, the Special gate, the live effects and the attack
pipeline, plus the tournament and campaign in progress. A Battle drives one
match between two registered combatants.
"""

import logging
import random

from ..config import Settings, get_settings
from .attacks import AttackPipeline, AttackResult
from .campaign import Campaign
from .effects import EffectTracker
from .enums import AttackKind
from .errors import ActionNotAllowed
from .events import EventBus
from .gate import SpecialAccessGate
from .roster import Roster
from .snapshot import BattleContext, BattleSnapshot
from .tournament import Tournament
from .turn import TurnManager
from .types import Combatant

logger = logging.getLogger(__name__)


class Battle:
    """One match between two combatants, alternating strictly."""

    def __init__(
        self,
        session: "GameSession",
        first: Combatant,
        second: Combatant,
        context: BattleContext = "duel",
    ) -> None:
        self.session = session
        self.context = context
        self.turns = TurnManager(first, second, bus=session.bus)
        self.winner: Combatant | None = None
        self.result_recorded = False

    @property
    def fighters(self) -> tuple[Combatant, Combatant]:
        return self.turns.fighters

    @property
    def active(self) -> Combatant:
        return self.turns.active

    @property
    def opponent(self) -> Combatant:
        return self.turns.opponent

    @property
    def round_number(self) -> int:
        return self.turns.round_number

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def act(self, kind: AttackKind | str) -> AttackResult:
        """The active fighter attacks the opponent, then the turn passes.

        Errors from the pipeline propagate unchanged and leave the turn with
        the same fighter, so the caller can offer another action.
        """
        if self.is_over:
            raise ActionNotAllowed("The battle is already over.")

        attacker, defender = self.active, self.opponent
        result = self.session.pipeline.execute(kind, attacker, defender)

        if not defender.is_alive():
            self.winner = attacker
            logger.info("Battle won by %s in round %d", attacker.name, self.round_number)
        else:
            self.turns.next_turn()
        return result

    def pass_turn(self) -> None:
        """Give up the action (e.g. nothing affordable)."""
        if self.is_over:
            raise ActionNotAllowed("The battle is already over.")
        self.turns.next_turn()

    def available_kinds(self) -> list[AttackKind]:
        """Attack kinds the active fighter could perform right now."""
        fighter = self.active
        kinds = []
        for kind in self.session.pipeline.available_kinds():
            if kind == AttackKind.SPECIAL:
                if self.session.gate.can_use_special(fighter):
                    kinds.append(kind)
                continue
            cost = fighter.adjust_ki_cost(self.session.pipeline.spec_for(kind).ki_cost)
            if fighter.can_spend_ki(cost):
                kinds.append(kind)
        return kinds

    def snapshot(self, context: BattleContext | None = None) -> BattleSnapshot:
        first, second = self.fighters
        return BattleSnapshot.capture(first, second, context=context or self.context, active_name=self.active.name)


class GameSession:
    """Top-level object of a running game."""

    def __init__(self, settings: Settings | None = None, rng: random.Random | None = None) -> None:
        self.settings = settings or get_settings()
        self.rng = rng or random.Random()
        self.bus = EventBus()
        self.roster = Roster(bus=self.bus, settings=self.settings)
        self.gate = SpecialAccessGate(settings=self.settings, bus=self.bus)
        self.effects = EffectTracker()
        self.pipeline = AttackPipeline(
            bus=self.bus,
            gate=self.gate,
            effects=self.effects,
            settings=self.settings,
            rng=self.rng,
        )
        self.battle: Battle | None = None
        self.tournament: Tournament | None = None
        self.campaign = Campaign()

    def start_battle(
        self,
        first: Combatant | str,
        second: Combatant | str,
        context: BattleContext = "duel",
    ) -> Battle:
        """Start a battle between two roster entries (or combatants)."""
        if isinstance(first, str):
            first = self.roster.get(first)
        if isinstance(second, str):
            second = self.roster.get(second)

        # Effects never outlive their battle
        self.effects.finish_all()
        self.battle = Battle(self, first, second, context=context)
        logger.info("Battle started: %s vs %s", first.name, second.name)
        return self.battle

    def start_tournament(self, player_name: str, names: list[str] | None = None) -> Tournament:
        """Seed a new tournament from the roster (or the given names)."""
        tournament = Tournament(names if names is not None else self.roster.names(), rng=self.rng)
        tournament.seed8(player_name)
        self.tournament = tournament
        return tournament

    def start_campaign_battle(self, player: Combatant | str, stage_index: int | None = None) -> Battle:
        """Fight the next opponent of the campaign.

        Args:
            player: The player's combatant (or its roster name)
            stage_index: Stage to (re)start; None continues the running stage

        Raises:
            ValueError: if the stage is locked or no stage is running
        """
        if stage_index is not None:
            self.campaign.start_stage(stage_index)
        opponent = self.campaign.current_opponent()
        if opponent is None:
            raise ValueError("No campaign stage in progress")

        player_name = player if isinstance(player, str) else player.name
        self.campaign.set_player_name(player_name)
        return self.start_battle(player, opponent, context="campaign")

    def record_campaign_result(self) -> bool:
        """Feed the finished campaign battle back into the campaign.

        Returns:
            True if the win cleared the running stage

        Raises:
            ActionNotAllowed: if there is no finished campaign battle
        """
        battle = self.battle
        if battle is None or battle.context != "campaign" or not battle.is_over or battle.result_recorded:
            raise ActionNotAllowed("No finished campaign battle to record.")
        battle.result_recorded = True

        if battle.winner.name == self.campaign.player_name:
            return self.campaign.record_victory()
        self.campaign.record_defeat()
        return False
