class GameError(Exception):
    """Base class for rule and search contract violations."""


class IllegalMove(GameError):
    """Placement on an occupied cell, outside the next zone, or after the game ended."""


class EmptySelection(GameError):
    """Asked to pick from an empty list of children or moves."""
