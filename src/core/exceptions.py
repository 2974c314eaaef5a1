"""
Custom exceptions.

Everything deriving from GameError is a player mistake: the service turns it into a failed response with a message.
InternalInvariantError does not derive from GameError: it signals a corrupt position and propagates out of the service.
"""


class GameError(Exception):
    """Top-level exception for anything the player can cause."""


class InputError(GameError):
    """Missing or malformed coordinates / promotion piece."""


class TurnViolationError(GameError):
    """Trying to move a piece of the color that is not to move."""


class IllegalMoveError(GameError):
    """Move breaks the movement rules or leaves your own king attacked."""


class GameOverError(GameError):
    """Move submitted after checkmate or stalemate."""


class InvalidFENError(GameError):
    """Cannot interpret the supplied string as a (playable) FEN position."""


class InvalidRequestError(GameError):
    """Request model could not be validated."""


class InternalInvariantError(Exception):
    """The position is in a state that correct rules can never reach (ex. a king is missing)."""


class RepositoryError(Exception):
    """Stored session data could not be read back."""
