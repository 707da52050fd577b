"""
Engine error types.
All derive from ValueError so callers can keep catching engine failures as ValueError,
while the presentation layer can tell a wrong-stage call from a bad argument.
"""


class GameError(ValueError):
    """Base class for every error raised by the engine."""


class InvalidStateError(GameError):
    """The operation is not legal in the current stage."""


class InvalidArgumentError(GameError):
    """A count, territory, or star total is out of range for the operation."""


class TerritoryNotFoundError(GameError):
    """A territory handle or name does not belong to the game's geography."""


class GeographyError(GameError):
    """A geography snapshot failed validation."""
