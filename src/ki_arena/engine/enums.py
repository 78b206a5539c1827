"""Enums for the combat engine."""

from enum import Enum


class Race(str, Enum):
    """Combatant race - decides default stats, Ki rules and Special effect."""

    SAIYAN = "Saiyan"
    NAMEKIAN = "Namekian"
    ANDROID = "Android"  # Never depletes Ki


class AttackKind(str, Enum):
    """Attack kinds - registry key and event discriminant."""

    NORMAL = "Normal"
    KI_ENERGY = "KiEnergy"
    SPECIAL = "Special"


class ConditionName(str, Enum):
    """Names of the four condition states."""

    NORMAL = "Normal"
    INJURED = "Injured"
    EXHAUSTED = "Exhausted"
    DEAD = "Dead"


class EffectKind(str, Enum):
    """Status effects granted by a Special, one per race."""

    SUPER_SAIYAN = "SuperSaiyan"
    REGENERATION = "Regeneration"
    ENERGY_LEECH = "EnergyLeech"


class EventKind(str, Enum):
    """Types of game events."""

    # Combat
    ATTACK_EXECUTED = "AttackExecuted"
    ATTACK_DODGED = "AttackDodged"
    STATE_CHANGED = "StateChanged"

    # Battle lifecycle
    TURN_CHANGED = "TurnChanged"
    BATTLE_STARTED = "BattleStarted"
    BATTLE_ENDED = "BattleEnded"

    # Status effects
    EFFECT_STARTED = "EffectStarted"
    EFFECT_TICK = "EffectTick"
    EFFECT_ENDED = "EffectEnded"
