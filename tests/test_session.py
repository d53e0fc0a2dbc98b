import random
from datetime import datetime, timedelta

import pytest
import pytz

from conftest import make_game, make_game_question, make_question, play_correctly
from game.hints import HintKind
from game.prizes import PRIZE_TABLE
from game.session import Game, GameStatus, create_game
from utils.errors import GameAlreadyFinished, HintAlreadyUsed, UnknownHintKind


def test_new_game_state() -> None:
    game = make_game(user_id=7)
    assert game.user_id == 7
    assert game.status is GameStatus.IN_PROGRESS
    assert game.current_level == 0
    assert game.prize == 0
    assert game.finished is False
    assert game.finished_at is None
    assert game.current_game_question is game.questions[0]
    assert game.previous_game_question is None
    assert game.previous_level == -1


def test_create_game_orders_and_shuffles_questions() -> None:
    questions = [make_question(level) for level in reversed(range(15))]
    game = create_game(3, questions, rng=random.Random(9))
    assert [gq.level for gq in game.questions] == list(range(15))
    for game_question in game.questions:
        key = game_question.correct_answer_key
        assert game_question.variants[key] == game_question.question.correct_answer


def test_game_requires_one_question_per_level() -> None:
    with pytest.raises(ValueError):
        Game(1, [make_game_question(level) for level in range(14)])
    with pytest.raises(ValueError):
        Game(1, [make_game_question(0) for _ in range(15)])


def test_correct_answers_advance_one_level_at_a_time() -> None:
    game = make_game()
    for level in range(14):
        assert game.current_level == level
        result = game.answer(game.current_game_question.correct_answer_key)
        assert result == {
            "status": "in_progress",
            "current_level": level + 1,
            "prize": PRIZE_TABLE.prize_for(level),
        }
        assert game.status is GameStatus.IN_PROGRESS
        assert game.previous_game_question is game.questions[level]


def test_correct_answer_on_last_level_wins() -> None:
    game = make_game()
    play_correctly(game, 14)
    assert game.current_level == 14

    result = game.answer("b")

    assert result["status"] == "won"
    assert game.status is GameStatus.WON
    assert game.prize == PRIZE_TABLE.prize_for(14) == 1000000
    assert game.current_level == 14
    assert game.finished is True
    assert game.finished_at is not None
    assert game.current_game_question is None


@pytest.mark.parametrize("action", ["answer", "use_help", "take_money", "timeout"])
def test_finished_game_rejects_moves(action: str) -> None:
    game = make_game()
    play_correctly(game, 15)
    finished_at = game.finished_at

    with pytest.raises(GameAlreadyFinished) as exc_info:
        if action == "answer":
            game.answer("b")
        elif action == "use_help":
            game.use_help("fifty_fifty")
        else:
            getattr(game, action)()

    assert exc_info.value.details["status"] == "won"
    assert game.snapshot() == {"status": "won", "current_level": 14, "prize": 1000000}
    assert game.finished_at == finished_at


@pytest.mark.parametrize(
    ("correct_answers", "expected_prize"),
    [(0, 0), (3, 0), (4, 0), (5, 1000), (9, 1000), (10, 32000), (14, 32000)],
)
def test_wrong_answer_pays_fireproof_floor(correct_answers: int, expected_prize: int) -> None:
    game = make_game()
    play_correctly(game, correct_answers)

    result = game.answer("a")

    assert result == {"status": "fail", "current_level": correct_answers, "prize": expected_prize}
    assert game.finished is True
    assert game.finished_at is not None


def test_wrong_answer_at_level_ten_pays_level_nine() -> None:
    game = make_game()
    play_correctly(game, 10)
    game.answer("d")
    assert game.prize == PRIZE_TABLE.prize_for(9)


@pytest.mark.parametrize("letter", ["e", "", None, "bb"])
def test_unrecognized_letter_is_a_wrong_answer(letter) -> None:
    game = make_game()
    play_correctly(game, 2)
    game.answer(letter)
    assert game.status is GameStatus.FAIL
    assert game.prize == 0


def test_take_money_after_two_correct_answers() -> None:
    game = make_game()
    play_correctly(game, 2)

    result = game.take_money()

    assert result == {"status": "money", "current_level": 2, "prize": PRIZE_TABLE.prize_for(1)}
    assert game.finished is True


def test_take_money_before_any_answer_pays_nothing() -> None:
    game = make_game()
    game.take_money()
    assert game.status is GameStatus.MONEY
    assert game.prize == 0


def test_take_money_after_hints() -> None:
    game = make_game()
    play_correctly(game, 6)
    game.use_help("fifty_fifty", rng=random.Random(1))
    game.use_help("audience_help", rng=random.Random(1))
    game.take_money()
    assert game.status is GameStatus.MONEY
    assert game.prize == PRIZE_TABLE.prize_for(5)


@pytest.mark.parametrize(("correct_answers", "expected_prize"), [(0, 0), (7, 1000), (12, 32000)])
def test_timeout_pays_fireproof_floor(correct_answers: int, expected_prize: int) -> None:
    game = make_game()
    play_correctly(game, correct_answers)
    result = game.timeout()
    assert result["status"] == "timeout"
    assert game.status is GameStatus.TIMEOUT
    assert game.prize == expected_prize


def test_use_help_returns_payload_without_changing_progress() -> None:
    game = make_game()
    play_correctly(game, 3)
    before = game.snapshot()

    payload = game.use_help(HintKind.FIFTY_FIFTY, rng=random.Random(4))

    assert game.snapshot() == before
    assert len(payload) == 2
    assert game.current_game_question.correct_answer_key in payload
    assert game.current_game_question.help_hash == {"fifty_fifty": payload}
    assert game.is_hint_used("fifty_fifty") is True


def test_each_hint_kind_once_per_game() -> None:
    game = make_game()
    game.use_help("friend_call", rng=random.Random(2))
    with pytest.raises(HintAlreadyUsed):
        game.use_help("friend_call")

    play_correctly(game, 1)
    with pytest.raises(HintAlreadyUsed):
        game.use_help("friend_call")
    assert game.current_game_question.help_hash == {}
    assert game.used_hints == frozenset({HintKind.FRIEND_CALL})


def test_unknown_hint_kind_leaves_game_untouched() -> None:
    game = make_game()
    with pytest.raises(UnknownHintKind):
        game.use_help("ask_the_host")
    assert game.used_hints == frozenset()
    assert game.current_game_question.help_hash == {}


def test_fifty_fifty_does_not_restrict_answers() -> None:
    game = make_game()
    kept = game.use_help("fifty_fifty", rng=random.Random(5))
    removed = next(letter for letter in "acd" if letter not in kept)
    game.answer(removed)
    assert game.status is GameStatus.FAIL


def test_is_time_over() -> None:
    created = datetime(2024, 2, 7, 13, 0, tzinfo=pytz.UTC)
    game = make_game(created_at=created, time_limit=timedelta(minutes=35))
    assert game.is_time_over(created + timedelta(minutes=34)) is False
    assert game.is_time_over(created + timedelta(minutes=36)) is True
    game.take_money()
    assert game.is_time_over(created + timedelta(minutes=36)) is False


def test_status_labels() -> None:
    assert GameStatus.IN_PROGRESS.label == "in progress"
    assert GameStatus.MONEY.label == "money"
    assert all(status.is_terminal for status in GameStatus if status is not GameStatus.IN_PROGRESS)
