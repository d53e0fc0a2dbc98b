"""
Database query helpers - common database operations and row <-> game mapping.
"""
from datetime import datetime
from typing import Dict, List, Optional, Sequence
import pytz
from sqlalchemy.orm import Session
from sqlalchemy import desc, func
from sqlalchemy.exc import IntegrityError

from database import models
from game.game_question import GameQuestion
from game.hints import HintKind
from game.question import Question
from game.session import Game, GameStatus

# Game row column holding the "used" flag of each hint kind
HINT_FLAG_COLUMNS = {
    HintKind.FIFTY_FIFTY: "fifty_fifty_used",
    HintKind.AUDIENCE_HELP: "audience_help_used",
    HintKind.FRIEND_CALL: "friend_call_used",
}


def is_active_game_conflict(error: IntegrityError) -> bool:
    """Whether an insert failed on the one-in-progress-game-per-user index."""
    diag = getattr(error.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint == models.ACTIVE_GAME_INDEX
    # SQLite names the columns instead of the index
    message = str(error.orig)
    return models.ACTIVE_GAME_INDEX in message or "UNIQUE constraint failed: games.user_id" in message


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes returned by backends without tz support."""
    if value is None or value.tzinfo is not None:
        return value
    return pytz.UTC.localize(value)


class UserQueries:
    """User-related database queries."""

    @staticmethod
    def create_user(session: Session, name: str) -> models.User:
        """Create a user."""
        user = models.User(name=name, balance=0)
        session.add(user)
        session.flush()
        return user

    @staticmethod
    def get_user(session: Session, user_id: int) -> Optional[models.User]:
        """Get user by id."""
        return session.get(models.User, user_id)

    @staticmethod
    def credit_balance(session: Session, user_id: int, amount: int) -> Optional[models.User]:
        """Add a game prize to the user's balance."""
        user = session.get(models.User, user_id)
        if user is not None and amount:
            user.balance += amount
            session.flush()
        return user


class QuestionQueries:
    """Question bank queries."""

    @staticmethod
    def add_question(
        session: Session,
        level: int,
        text: str,
        answers: Sequence[str],
        correct_index: int = 0
    ) -> models.Question:
        """Add a question to the bank."""
        # Validates shape before anything reaches the database
        Question(id=None, level=level, text=text, answers=tuple(answers), correct_index=correct_index)
        answer1, answer2, answer3, answer4 = answers
        question = models.Question(
            level=level,
            text=text,
            answer1=answer1,
            answer2=answer2,
            answer3=answer3,
            answer4=answer4,
            correct_index=correct_index
        )
        session.add(question)
        session.flush()
        return question

    @staticmethod
    def count_by_level(session: Session) -> Dict[int, int]:
        """Number of questions per level."""
        rows = (
            session.query(models.Question.level, func.count(models.Question.id))
            .group_by(models.Question.level)
            .all()
        )
        return {level: count for level, count in rows}

    @staticmethod
    def get_questions_for_level(session: Session, level: int) -> List[models.Question]:
        """All questions of one level."""
        return (
            session.query(models.Question)
            .filter(models.Question.level == level)
            .order_by(models.Question.id)
            .all()
        )

    @staticmethod
    def get_random_question_for_level(session: Session, level: int) -> Optional[models.Question]:
        """One random question of the given level."""
        return (
            session.query(models.Question)
            .filter(models.Question.level == level)
            .order_by(func.random())
            .first()
        )

    @staticmethod
    def to_domain(row: models.Question) -> Question:
        return Question(
            id=row.id,
            level=row.level,
            text=row.text,
            answers=row.answers,
            correct_index=row.correct_index
        )


class GameQueries:
    """Game-related database queries."""

    @staticmethod
    def get_game_row(session: Session, game_id: int, for_update: bool = False) -> Optional[models.Game]:
        """Get game row by ID, optionally locking it until the transaction ends."""
        query = session.query(models.Game).filter(models.Game.id == game_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def get_active_game_row(session: Session, user_id: int) -> Optional[models.Game]:
        """The user's in-progress game, if any."""
        return (
            session.query(models.Game)
            .filter(
                models.Game.user_id == user_id,
                models.Game.status == GameStatus.IN_PROGRESS.value
            )
            .first()
        )

    @staticmethod
    def list_user_games(session: Session, user_id: int) -> List[models.Game]:
        """All games of a user, newest first."""
        return (
            session.query(models.Game)
            .filter(models.Game.user_id == user_id)
            .order_by(desc(models.Game.created_at), desc(models.Game.id))
            .all()
        )

    @staticmethod
    def get_expired_game_ids(session: Session, cutoff: datetime) -> List[int]:
        """Ids of in-progress games created before ``cutoff``."""
        rows = (
            session.query(models.Game.id)
            .filter(
                models.Game.status == GameStatus.IN_PROGRESS.value,
                models.Game.created_at < cutoff
            )
            .order_by(models.Game.id)
            .all()
        )
        return [row.id for row in rows]

    @staticmethod
    def to_domain(row: models.Game) -> Game:
        """Rebuild an in-memory game from its rows."""
        questions = [
            GameQuestion(
                QuestionQueries.to_domain(gq.question),
                answer_order=gq.answer_order,
                help_hash=gq.help_hash
            )
            for gq in sorted(row.game_questions, key=lambda gq: gq.level)
        ]
        return Game(
            row.user_id,
            questions,
            id=row.id,
            current_level=row.current_level,
            status=GameStatus(row.status),
            prize=row.prize,
            used_hints=[kind for kind, column in HINT_FLAG_COLUMNS.items() if getattr(row, column)],
            created_at=as_utc(row.created_at),
            finished_at=as_utc(row.finished_at)
        )

    @staticmethod
    def load_game(session: Session, game_id: int, for_update: bool = False) -> Optional[Game]:
        """Load a game by id; ``for_update`` locks the row for the rest of the transaction."""
        row = GameQueries.get_game_row(session, game_id, for_update=for_update)
        if row is None:
            return None
        return GameQueries.to_domain(row)

    @staticmethod
    def save_game(session: Session, game: Game) -> models.Game:
        """
        Insert or update a game and its questions.

        New games get their id assigned on the in-memory object.
        """
        row = session.get(models.Game, game.id) if game.id is not None else None
        if row is None:
            row = models.Game(user_id=game.user_id, created_at=game.created_at)
            session.add(row)
            for game_question in game.questions:
                row.game_questions.append(models.GameQuestion(
                    question_id=game_question.question.id,
                    level=game_question.level,
                    answer_order=dict(game_question.answer_order),
                    help_hash=game_question.help_hash
                ))
        else:
            for gq_row, game_question in zip(
                sorted(row.game_questions, key=lambda gq: gq.level), game.questions
            ):
                gq_row.help_hash = game_question.help_hash

        row.current_level = game.current_level
        row.prize = game.prize
        row.status = game.status.value
        row.finished_at = game.finished_at
        for kind, column in HINT_FLAG_COLUMNS.items():
            setattr(row, column, game.is_hint_used(kind))

        session.flush()
        game.id = row.id
        return row
