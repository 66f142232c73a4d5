# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Exception taxonomy for the game engine.

Precondition failures abort the current game: the game manager marks the
game over and lets the exception propagate to the caller. Nothing in the
engine retries, so every exception here is terminal for the operation that
raised it.
"""

from __future__ import annotations


class GameEngineError(Exception):
    """Base class for all engine errors."""


class InvalidPlayerError(GameEngineError):
    """Raised for a null, blank, or unregistered player reference."""

    def __init__(self, message: str, player_id: str | None = None):
        self.player_id = player_id
        super().__init__(message)


class GamePreconditionError(GameEngineError):
    """A game cannot start or continue because a collaborator is empty."""

    def __init__(self, message: str, side: str | None = None):
        self.side = side
        super().__init__(message)


class MissingLineupError(GamePreconditionError):
    """The batting team has no lineup to draw a batter from."""


class MissingPitcherError(GamePreconditionError):
    """The fielding team has no pitcher available."""


class UnknownStatError(GameEngineError):
    """A stat name could not be mapped to a supported stat kind."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown stat: {name!r}")


class GameOverError(GameEngineError):
    """A pitch was requested after the game reached its terminal state."""


class ReplayExhaustedError(GameEngineError):
    """A scripted outcome sequence ran out before the game finished."""
