"""
SQLAlchemy models for the Millionaire game engine.
"""
from datetime import datetime
import pytz
from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

ACTIVE_GAME_INDEX = "uq_games_user_in_progress"


def utcnow() -> datetime:
    return datetime.now(pytz.UTC)


class User(Base):
    """Player account; only identity and balance matter to the game."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    balance = Column(BigInteger, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    games = relationship("Game", back_populates="user", order_by="Game.created_at.desc()")


class Question(Base):
    """Question bank entry."""
    __tablename__ = "questions"
    __table_args__ = (
        CheckConstraint("level >= 0 AND level <= 14", name="ck_questions_level"),
        CheckConstraint("correct_index >= 0 AND correct_index <= 3", name="ck_questions_correct_index"),
    )

    id = Column(Integer, primary_key=True)
    level = Column(Integer, nullable=False, index=True)
    text = Column(Text, nullable=False)
    answer1 = Column(String(255), nullable=False)
    answer2 = Column(String(255), nullable=False)
    answer3 = Column(String(255), nullable=False)
    answer4 = Column(String(255), nullable=False)
    correct_index = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    @property
    def answers(self):
        return (self.answer1, self.answer2, self.answer3, self.answer4)


class Game(Base):
    """Persisted game state."""
    __tablename__ = "games"
    __table_args__ = (
        # One in-progress game per user
        Index(
            ACTIVE_GAME_INDEX,
            "user_id",
            unique=True,
            postgresql_where=text("status = 'in_progress'"),
            sqlite_where=text("status = 'in_progress'"),
        ),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    current_level = Column(Integer, default=0, nullable=False)
    prize = Column(BigInteger, default=0, nullable=False)
    status = Column(String(16), default="in_progress", nullable=False, index=True)
    fifty_fifty_used = Column(Boolean, default=False, nullable=False)
    audience_help_used = Column(Boolean, default=False, nullable=False)
    friend_call_used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    finished_at = Column(DateTime(timezone=True), nullable=True)
    # Bumped on every UPDATE; a write based on a stale read fails with StaleDataError
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    user = relationship("User", back_populates="games")
    game_questions = relationship(
        "GameQuestion",
        back_populates="game",
        order_by="GameQuestion.level",
        cascade="all, delete-orphan",
    )


class GameQuestion(Base):
    """Question as played in one game: letter order and hint payloads."""
    __tablename__ = "game_questions"

    game_id = Column(Integer, ForeignKey("games.id", ondelete="CASCADE"), primary_key=True)
    question_id = Column(Integer, ForeignKey("questions.id"), primary_key=True)
    level = Column(Integer, nullable=False)
    # {"a": 2, "b": 0, ...} letter -> answer position in the question
    answer_order = Column(JSON, nullable=False)
    help_hash = Column(JSON, nullable=False, default=dict)

    game = relationship("Game", back_populates="game_questions")
    question = relationship("Question")
