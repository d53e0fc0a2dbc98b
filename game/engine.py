"""
Game engine - storage-backed entry point for creating and playing games.

Every call loads the game with its row locked, applies one move through
the in-memory state machine, and persists the result in the same
transaction.
"""
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Dict, Iterator, List, Optional, Tuple
import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from database.session import DatabaseSession, get_db_session
from database.queries import GameQueries, UserQueries, is_active_game_conflict
from game.session import Game, GameStatus
from questions.manager import QuestionManager
from utils.errors import GameAlreadyFinished, GameError, GameNotFound, UserAlreadyPlaying
from utils.logging import get_logger
import config

logger = get_logger(__name__)


class GameEngine:
    """Main game engine class."""

    def __init__(
        self,
        db: Optional[DatabaseSession] = None,
        question_manager: Optional[QuestionManager] = None,
        rng=None
    ):
        """
        Initialize game engine.

        Args:
            db: Database to use; the global one when omitted
            question_manager: Question bank; built over ``db`` when omitted
            rng: Random source for answer shuffling and hints
        """
        self.config = config.config
        self.db = db or get_db_session()
        self.question_manager = question_manager or QuestionManager(self.db)
        self.rng = rng

    @property
    def time_limit(self) -> timedelta:
        return timedelta(minutes=self.config.GAME_TIME_LIMIT_MINUTES)

    def create_game(self, user_id: int) -> Game:
        """
        Start a new game for a user.

        Raises:
            UserAlreadyPlaying: the user has a game in progress
            InsufficientQuestions: the bank cannot cover every level
        """
        with self.db.get_session() as session:
            active = GameQueries.get_active_game_row(session, user_id)
            if active is not None:
                raise UserAlreadyPlaying(
                    f"User {user_id} already has game {active.id} in progress",
                    details={"user_id": user_id, "game_id": active.id}
                )

        questions = self.question_manager.draw_ordered_set()
        game = Game.create(user_id, questions, rng=self.rng, time_limit=self.time_limit)

        try:
            with self.db.get_session() as session:
                GameQueries.save_game(session, game)
        except IntegrityError as e:
            if not is_active_game_conflict(e):
                raise
            # Lost a race against a concurrent create for the same user
            raise UserAlreadyPlaying(
                f"User {user_id} already has a game in progress",
                details={"user_id": user_id}
            ) from e

        logger.info(f"Game {game.id} started for user {user_id}")
        return game

    def get_game(self, game_id: int) -> Game:
        """Load a game or raise GameNotFound."""
        with self.db.get_session() as session:
            return self._load(session, game_id)

    def get_active_game(self, user_id: int) -> Optional[Game]:
        """The user's in-progress game, if any."""
        with self.db.get_session() as session:
            row = GameQueries.get_active_game_row(session, user_id)
            return GameQueries.to_domain(row) if row is not None else None

    def list_user_games(self, user_id: int) -> List[Game]:
        """All games of a user, newest first."""
        with self.db.get_session() as session:
            return [GameQueries.to_domain(row) for row in GameQueries.list_user_games(session, user_id)]

    def answer(self, game_id: int, letter, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Answer the active question of a game.

        A game past its time limit is timed out instead and the timeout
        result is returned.
        """
        with self._game_transaction(game_id) as (session, game):
            if self._expire_if_overdue(session, game, now):
                return game.snapshot()
            result = game.answer(letter)
            self._save(session, game)
            return result

    def use_help(self, game_id: int, kind, now: Optional[datetime] = None):
        """
        Use a hint on the active question and return its payload.

        Raises:
            GameAlreadyFinished: game is over, including when it just timed out
            UnknownHintKind, HintAlreadyUsed: see Game.use_help
        """
        with self._game_transaction(game_id) as (session, game):
            timed_out = self._expire_if_overdue(session, game, now)
            if not timed_out:
                payload = game.use_help(kind, rng=self.rng)
                self._save(session, game)
                return payload

        raise GameAlreadyFinished(
            f"Game {game_id} ran out of time",
            details={"game_id": game_id, "status": GameStatus.TIMEOUT.value, "action": "use_help"}
        )

    def take_money(self, game_id: int, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Cash out; an overdue game is timed out instead."""
        with self._game_transaction(game_id) as (session, game):
            if self._expire_if_overdue(session, game, now):
                return game.snapshot()
            result = game.take_money()
            self._save(session, game)
            return result

    def time_out(self, game_id: int) -> Dict[str, Any]:
        """End a game because its time ran out."""
        with self._game_transaction(game_id) as (session, game):
            result = game.timeout()
            self._save(session, game)
            return result

    def expire_timed_out_games(self, now: Optional[datetime] = None) -> List[int]:
        """
        Time out every in-progress game older than the time limit.

        Each game is expired in its own transaction; games a player
        finished in the meantime are skipped.
        """
        now = now or datetime.now(pytz.UTC)
        with self.db.get_session() as session:
            candidates = GameQueries.get_expired_game_ids(session, now - self.time_limit)

        expired = []
        for game_id in candidates:
            try:
                with self._game_transaction(game_id) as (session, game):
                    if self._expire_if_overdue(session, game, now):
                        expired.append(game_id)
            except (GameError, GameNotFound) as e:
                logger.debug(f"Skipping expiry of game {game_id}: {e}")
        if expired:
            logger.info(f"Timed out {len(expired)} games: {expired}")
        return expired

    @contextmanager
    def _game_transaction(self, game_id: int) -> Iterator[Tuple[Any, Game]]:
        """
        Load a game with its row locked and persist changes on exit.

        Writers serialize on the row lock; where the backend has no row
        locks, the version check on the games row rejects the later write.
        """
        try:
            with self.db.get_session() as session:
                yield session, self._load(session, game_id, for_update=True)
        except StaleDataError as e:
            current = self.get_game(game_id)
            logger.warning(f"Game {game_id} changed concurrently, now {current.status.value}")
            if current.finished:
                raise GameAlreadyFinished(
                    f"Game {game_id} is already finished",
                    details={"game_id": game_id, "status": current.status.value}
                ) from e
            raise GameError(
                f"Game {game_id} was changed concurrently",
                details={"game_id": game_id}
            ) from e

    def _load(self, session, game_id: int, for_update: bool = False) -> Game:
        game = GameQueries.load_game(session, game_id, for_update=for_update)
        if game is None:
            raise GameNotFound(f"Game {game_id} not found", details={"game_id": game_id})
        game.time_limit = self.time_limit
        return game

    def _expire_if_overdue(self, session, game: Game, now: Optional[datetime]) -> bool:
        if not game.is_time_over(now):
            return False
        game.timeout()
        self._save(session, game)
        return True

    def _save(self, session, game: Game) -> None:
        GameQueries.save_game(session, game)
        if game.finished:
            UserQueries.credit_balance(session, game.user_id, game.prize)
