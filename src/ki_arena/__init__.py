"""Ki Arena - rules engine for a two-fighter, turn-based fighting game."""

__version__ = "0.1.0"
