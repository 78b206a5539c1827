"""Engine exceptions.

Every error is raised before any mutation, so a caller can surface the
message and let the player pick another action.
"""


class KiArenaError(ValueError):
    """Base exception for engine errors."""


class ActionNotAllowed(KiArenaError):
    """Raised when the attacker or the defender is already down."""


class InsufficientResource(KiArenaError):
    """Raised when an attack costs more Ki than the attacker has."""


class SpecialNotUnlocked(KiArenaError):
    """Raised when a Special is attempted before the unlock round."""


class SpecialAlreadyUsed(KiArenaError):
    """Raised when a combatant already used their Special this battle."""


class SpecialGateFailed(KiArenaError):
    """Raised when neither the Ki nor the low-health requirement is met."""


class UnknownAttackKind(KiArenaError):
    """Raised on an attack registry miss."""


class UnknownRace(KiArenaError):
    """Raised on a race registry miss."""


class UnknownCombatant(KiArenaError):
    """Raised when a name is not registered in the roster."""
