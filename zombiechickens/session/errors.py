"""
Session errors - Why a lobby or game request was refused.

Each carries a stable `error_code` that the API layer passes through.
"""

from __future__ import annotations


class SessionError(Exception):
    error_code = "SESSION_ERROR"
    message = "session error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class GameAlreadyStartedError(SessionError):
    error_code = "GAME_ALREADY_STARTED"
    message = "game has already started"


class GameNotStartedError(SessionError):
    error_code = "GAME_NOT_STARTED"
    message = "game has not started"


class GameFullError(SessionError):
    error_code = "GAME_FULL"
    message = "game is full (max 4 players)"


class GameOverError(SessionError):
    error_code = "GAME_OVER"
    message = "game is over"


class NotEnoughPlayersError(SessionError):
    error_code = "NOT_ENOUGH_PLAYERS"
    message = "not enough players to start"


class NameTakenError(SessionError):
    error_code = "NAME_TAKEN"
    message = "player name is already taken"


class NotHostError(SessionError):
    error_code = "NOT_HOST"
    message = "only the first player can start the game"


class PlayerNotFoundError(SessionError):
    error_code = "PLAYER_NOT_FOUND"
    message = "player not found in game"


class NotYourTurnError(SessionError):
    error_code = "NOT_YOUR_TURN"
    message = "not your turn"


class NoInputNeededError(SessionError):
    error_code = "NO_INPUT_NEEDED"
    message = "no input needed"


class InvalidChoiceError(SessionError):
    error_code = "INVALID_CHOICE"
    message = "invalid choice"
