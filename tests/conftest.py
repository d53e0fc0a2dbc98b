from __future__ import annotations

import random
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from database.queries import QuestionQueries, UserQueries  # noqa: E402
from database.session import DatabaseSession  # noqa: E402
from game.game_question import GameQuestion  # noqa: E402
from game.question import Question  # noqa: E402
from game.session import Game  # noqa: E402

# Same layout as a hand-built fixture: the correct answer (position 0) sits under "b"
FIXED_ORDER = {"a": 1, "b": 0, "c": 3, "d": 2}


def make_question(level: int = 0, correct_index: int = 0, question_id: int | None = None) -> Question:
    return Question(
        id=question_id if question_id is not None else 100 + level,
        level=level,
        text=f"Question for level {level}?",
        answers=tuple(f"Answer {n} (level {level})" for n in range(1, 5)),
        correct_index=correct_index,
    )


def make_game_question(level: int = 0, order: dict[str, int] | None = None) -> GameQuestion:
    return GameQuestion(make_question(level), answer_order=dict(order or FIXED_ORDER))


def make_game(user_id: int = 1, **kwargs) -> Game:
    return Game(user_id, [make_game_question(level) for level in range(15)], **kwargs)


def play_correctly(game: Game, answers: int) -> None:
    for _ in range(answers):
        game.answer(game.current_game_question.correct_answer_key)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(20240207)


@pytest.fixture
def db() -> Iterator[DatabaseSession]:
    database = DatabaseSession("sqlite://")
    database.create_tables()
    try:
        yield database
    finally:
        database.drop_tables()
        database.dispose()


def seed_questions(db: DatabaseSession) -> None:
    """Two questions per level, correct answer always at position 0."""
    with db.get_session() as session:
        for level in range(15):
            for variant in range(2):
                QuestionQueries.add_question(
                    session,
                    level,
                    f"Level {level} question {variant}?",
                    [f"right {level}/{variant}", "wrong 1", "wrong 2", "wrong 3"],
                )


@pytest.fixture
def seeded_db(db: DatabaseSession) -> DatabaseSession:
    seed_questions(db)
    return db


@pytest.fixture
def file_db(tmp_path: Path) -> Iterator[DatabaseSession]:
    """Seeded on-disk database; unlike ":memory:" every session gets its own connection."""
    database = DatabaseSession(f"sqlite:///{tmp_path / 'millionaire.db'}")
    database.create_tables()
    seed_questions(database)
    try:
        yield database
    finally:
        database.dispose()


@pytest.fixture
def user_id(seeded_db: DatabaseSession) -> int:
    with seeded_db.get_session() as session:
        return UserQueries.create_user(session, "Jane Doe").id
