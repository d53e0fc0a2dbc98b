"""
Custom exception classes for the Millionaire game engine.
"""
from typing import Optional


class MillionaireError(Exception):
    """Base exception for the Millionaire game engine."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize error.

        Args:
            message: Error message
            details: Optional additional details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __repr__(self):
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details})"


class GameError(MillionaireError):
    """Exception raised for game-rule violations."""
    pass


class GameAlreadyFinished(GameError):
    """A mutating call was made on a game in a terminal status."""
    pass


class HintAlreadyUsed(GameError):
    """The requested hint kind has already been consumed."""
    pass


class UnknownHintKind(GameError):
    """The requested hint kind is not one of the recognized kinds."""
    pass


class UserAlreadyPlaying(MillionaireError):
    """The user already has a game in progress."""
    pass


class InsufficientQuestions(MillionaireError):
    """The question bank cannot supply one question for every level."""
    pass


class GameNotFound(MillionaireError):
    """No game with the given id exists."""
    pass


class DatabaseError(MillionaireError):
    """Exception raised for database-related errors."""
    pass


class ConfigurationError(MillionaireError):
    """Exception raised for configuration errors."""
    pass
