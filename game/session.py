"""
Game session - the state machine of one game.
"""
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Sequence
import pytz

from game.game_question import GameQuestion
from game.hints import HintKind
from game.prizes import PRIZE_TABLE, PrizeTable
from game.question import Question
from utils.errors import GameAlreadyFinished, HintAlreadyUsed
from utils.logging import get_logger
import config

logger = get_logger(__name__)


class GameStatus(str, Enum):
    """Game statuses; everything except IN_PROGRESS is terminal."""
    IN_PROGRESS = "in_progress"
    WON = "won"
    FAIL = "fail"
    MONEY = "money"
    TIMEOUT = "timeout"

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.IN_PROGRESS

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS = {
    GameStatus.IN_PROGRESS: "in progress",
    GameStatus.WON: "victory",
    GameStatus.FAIL: "wrong answer",
    GameStatus.MONEY: "money",
    GameStatus.TIMEOUT: "out of time",
}


class Game:
    """
    One player's game: fifteen questions, one active at a time.

    Prize is always derived from completed levels: a wrong answer or a
    timeout only pays the fireproof floor reached before the active question.
    """

    def __init__(
        self,
        user_id: int,
        questions: Sequence[GameQuestion],
        id: Optional[int] = None,
        current_level: int = 0,
        status: GameStatus = GameStatus.IN_PROGRESS,
        prize: int = 0,
        used_hints: Iterable = (),
        created_at: Optional[datetime] = None,
        finished_at: Optional[datetime] = None,
        prize_table: PrizeTable = PRIZE_TABLE,
        time_limit: Optional[timedelta] = None
    ):
        if len(questions) != len(prize_table):
            raise ValueError(
                f"Game needs {len(prize_table)} questions, got {len(questions)}"
            )
        for level, game_question in enumerate(questions):
            if game_question.level != level:
                raise ValueError(
                    f"Question at position {level} has level {game_question.level}"
                )
        if not 0 <= current_level <= prize_table.last_level:
            raise ValueError(f"current_level out of range: {current_level}")

        self.id = id
        self.user_id = user_id
        self.prize_table = prize_table
        self._questions = tuple(questions)
        self._current_level = current_level
        self._status = GameStatus(status)
        self._prize = prize
        self._used_hints = {HintKind.parse(kind) for kind in used_hints}
        self.created_at = created_at or datetime.now(pytz.UTC)
        self.finished_at = finished_at
        if time_limit is None:
            time_limit = timedelta(minutes=config.config.GAME_TIME_LIMIT_MINUTES)
        self.time_limit = time_limit

    @classmethod
    def create(
        cls,
        user_id: int,
        questions: Sequence[Question],
        rng=None,
        **kwargs: Any
    ) -> "Game":
        """Build a fresh game, shuffling the answers of every question."""
        ordered = sorted(questions, key=lambda q: q.level)
        game = cls(
            user_id,
            [GameQuestion(question, rng=rng) for question in ordered],
            **kwargs
        )
        logger.info(f"Created game for user {user_id} with questions {[q.id for q in ordered]}")
        return game

    def __repr__(self):
        return (
            f"Game(id={self.id}, user_id={self.user_id}, status={self._status.value}, "
            f"level={self._current_level}, prize={self._prize})"
        )

    # Read accessors

    @property
    def questions(self) -> tuple:
        return self._questions

    @property
    def current_level(self) -> int:
        return self._current_level

    @property
    def previous_level(self) -> int:
        return self._current_level - 1

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def prize(self) -> int:
        return self._prize

    @property
    def finished(self) -> bool:
        return self._status.is_terminal

    @property
    def used_hints(self) -> frozenset:
        return frozenset(self._used_hints)

    @property
    def current_game_question(self) -> Optional[GameQuestion]:
        """The active question, or None once the game is over."""
        if self.finished:
            return None
        return self._questions[self._current_level]

    @property
    def previous_game_question(self) -> Optional[GameQuestion]:
        """The last question answered correctly, if any."""
        if self.previous_level < 0:
            return None
        return self._questions[self.previous_level]

    def is_hint_used(self, kind) -> bool:
        return HintKind.parse(kind) in self._used_hints

    def is_time_over(self, now: Optional[datetime] = None) -> bool:
        """Whether the wall-clock budget of an in-progress game is spent."""
        if self.finished:
            return False
        now = now or datetime.now(pytz.UTC)
        return now > self.created_at + self.time_limit

    def snapshot(self) -> Dict[str, Any]:
        return {
            'status': self._status.value,
            'current_level': self._current_level,
            'prize': self._prize,
        }

    # Moves

    def answer(self, letter) -> Dict[str, Any]:
        """
        Answer the active question.

        Args:
            letter: 'a'-'d'; anything else counts as a wrong answer

        Returns:
            Dict with 'status', 'current_level', 'prize'
        """
        self._ensure_in_progress("answer")
        game_question = self._questions[self._current_level]

        if not game_question.is_correct(letter):
            logger.info(
                f"Game {self.id}: wrong answer {letter!r} at level {self._current_level} "
                f"(correct {game_question.correct_answer_key!r})"
            )
            self._finish(
                GameStatus.FAIL,
                self.prize_table.fireproof_prize_below(self.previous_level)
            )
        elif self.prize_table.is_last_level(self._current_level):
            self._finish(GameStatus.WON, self.prize_table.prize_for(self._current_level))
        else:
            self._current_level += 1
            self._prize = self.prize_table.prize_for(self.previous_level)
            logger.debug(f"Game {self.id}: advanced to level {self._current_level}")

        return self.snapshot()

    def use_help(self, kind, rng=None):
        """
        Use a hint on the active question.

        Returns:
            The hint payload

        Raises:
            GameAlreadyFinished: game is over
            UnknownHintKind: kind is not recognized
            HintAlreadyUsed: kind was already used in this game
        """
        self._ensure_in_progress("use_help")
        kind = HintKind.parse(kind)
        if kind in self._used_hints:
            raise HintAlreadyUsed(
                f"Hint {kind.value} already used in game {self.id}",
                details={"kind": kind.value, "game_id": self.id}
            )

        payload = self._questions[self._current_level].add_hint(kind, rng=rng)
        self._used_hints.add(kind)
        logger.info(f"Game {self.id}: hint {kind.value} used at level {self._current_level}")
        return payload

    def take_money(self) -> Dict[str, Any]:
        """Cash out with the prize of the last completed level."""
        self._ensure_in_progress("take_money")
        self._finish(GameStatus.MONEY, self.prize_table.prize_for(self.previous_level))
        return self.snapshot()

    def timeout(self) -> Dict[str, Any]:
        """End the game because time ran out; pays the fireproof floor like a fail."""
        self._ensure_in_progress("timeout")
        self._finish(
            GameStatus.TIMEOUT,
            self.prize_table.fireproof_prize_below(self.previous_level)
        )
        return self.snapshot()

    def _ensure_in_progress(self, action: str) -> None:
        if self.finished:
            raise GameAlreadyFinished(
                f"Game {self.id} is already finished ({self._status.value})",
                details={"game_id": self.id, "status": self._status.value, "action": action}
            )

    def _finish(self, status: GameStatus, prize: int) -> None:
        self._status = status
        self._prize = prize
        self.finished_at = datetime.now(pytz.UTC)
        logger.info(
            f"Game {self.id} finished: status={status.value}, "
            f"level={self._current_level}, prize={prize}"
        )


def create_game(user_id: int, questions: Sequence[Question], rng=None) -> Game:
    """Create a game from an ordered set of questions, one per level."""
    return Game.create(user_id, questions, rng=rng)
