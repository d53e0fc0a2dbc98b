"""
Database module for the Millionaire game engine.
Contains models, database session management, and queries.
"""
from database.session import get_db_session, db_session, DatabaseSession
from database.models import Base, User, Question, Game, GameQuestion

__all__ = [
    "get_db_session",
    "db_session",
    "DatabaseSession",
    "Base",
    "User",
    "Question",
    "Game",
    "GameQuestion",
]
