"""Combat engine module - combatants, attacks, effects, turns and tournaments."""

from .attacks import AttackPipeline, AttackResult, dodge_chance
from .campaign import Campaign, CampaignStage
from .commands import CommandBus, CommandContext, CommandResult
from .conditions import ConditionEvaluator
from .duel import Battle, GameSession
from .effects import EffectTracker, StatusEffect
from .enums import AttackKind, ConditionName, EffectKind, EventKind, Race
from .events import EventBus, GameEvent
from .gate import SpecialAccessGate
from .logging import CombatLog, CombatLogger, LogEntry, LogEventType, StateSnapshot
from .roster import Roster, WarriorPreset, create_combatant
from .snapshot import BattleSnapshot
from .tournament import Match, Tournament, quick_resolve
from .turn import TurnManager
from .types import BaseStats, Combatant

__all__ = [
    "AttackKind",
    "ConditionName",
    "EffectKind",
    "EventKind",
    "Race",
    "BaseStats",
    "Combatant",
    "ConditionEvaluator",
    "EventBus",
    "GameEvent",
    "StatusEffect",
    "EffectTracker",
    "AttackPipeline",
    "AttackResult",
    "dodge_chance",
    "SpecialAccessGate",
    "TurnManager",
    "Tournament",
    "Campaign",
    "CampaignStage",
    "Match",
    "quick_resolve",
    "Roster",
    "WarriorPreset",
    "create_combatant",
    "BattleSnapshot",
    "Battle",
    "GameSession",
    "CommandBus",
    "CommandContext",
    "CommandResult",
    "CombatLogger",
    "CombatLog",
    "LogEntry",
    "LogEventType",
    "StateSnapshot",
]
