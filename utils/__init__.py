"""
Utilities module for the Millionaire game engine.
Contains retry decorators, error classes, and logging setup.
"""
from utils.retry import retry_with_backoff, database_retry
from utils.errors import (
    MillionaireError,
    GameError,
    GameAlreadyFinished,
    HintAlreadyUsed,
    UnknownHintKind,
    UserAlreadyPlaying,
    InsufficientQuestions,
    GameNotFound,
    DatabaseError,
    ConfigurationError,
)
from utils.logging import setup_logging, get_logger

__all__ = [
    "retry_with_backoff",
    "database_retry",
    "MillionaireError",
    "GameError",
    "GameAlreadyFinished",
    "HintAlreadyUsed",
    "UnknownHintKind",
    "UserAlreadyPlaying",
    "InsufficientQuestions",
    "GameNotFound",
    "DatabaseError",
    "ConfigurationError",
    "setup_logging",
    "get_logger",
]
