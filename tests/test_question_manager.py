import pytest

from database.session import DatabaseSession
from questions.manager import QuestionManager
from utils.errors import InsufficientQuestions


def test_draw_ordered_set_covers_every_level(seeded_db: DatabaseSession) -> None:
    questions = QuestionManager(seeded_db).draw_ordered_set()
    assert [q.level for q in questions] == list(range(15))
    assert len({q.id for q in questions}) == 15
    assert all(q.correct_answer.startswith("right") for q in questions)


def test_draw_is_random_within_level(seeded_db: DatabaseSession) -> None:
    manager = QuestionManager(seeded_db)
    drawn = {tuple(q.id for q in manager.draw_ordered_set()) for _ in range(30)}
    assert len(drawn) > 1


def test_draw_fails_when_a_level_is_empty(db: DatabaseSession) -> None:
    manager = QuestionManager(db)
    for level in range(15):
        if level != 6:
            manager.add_question(level, f"q{level}?", ["w", "x", "y", "z"])

    with pytest.raises(InsufficientQuestions) as exc_info:
        manager.draw_ordered_set()
    assert exc_info.value.details["missing_levels"] == [6]


def test_draw_fails_on_empty_bank(db: DatabaseSession) -> None:
    with pytest.raises(InsufficientQuestions):
        QuestionManager(db).draw_ordered_set()


def test_draw_smaller_set(db: DatabaseSession) -> None:
    manager = QuestionManager(db)
    manager.add_question(0, "q0?", ["w", "x", "y", "z"], correct_index=3)
    manager.add_question(1, "q1?", ["w", "x", "y", "z"])
    questions = manager.draw_ordered_set(count=2)
    assert [q.level for q in questions] == [0, 1]
    assert questions[0].correct_answer == "z"


def test_count_by_level(seeded_db: DatabaseSession) -> None:
    assert QuestionManager(seeded_db).count_by_level()[14] == 2
