import random
from datetime import datetime, timedelta

import pytest
import pytz

from database import models
from database import session as session_module
from database.session import DatabaseSession
from game.engine import GameEngine
from game.session import GameStatus
from tasks.celery_app import celery_app
from tasks.game_timeout import sweep_expired_games, time_out_game


@pytest.fixture
def global_db(seeded_db: DatabaseSession, monkeypatch: pytest.MonkeyPatch) -> DatabaseSession:
    monkeypatch.setattr(session_module, "_db_session", seeded_db)
    return seeded_db


def test_tasks_are_registered() -> None:
    assert "tasks.game_timeout.time_out_game" in celery_app.tasks
    assert "tasks.game_timeout.sweep_expired_games" in celery_app.tasks
    assert "sweep-expired-games" in celery_app.conf.beat_schedule


def test_time_out_game_task(global_db: DatabaseSession, user_id: int) -> None:
    game = GameEngine(rng=random.Random(1)).create_game(user_id)

    result = time_out_game(game.id)

    assert result == {"status": "timeout", "current_level": 0, "prize": 0}
    assert GameEngine().get_game(game.id).status is GameStatus.TIMEOUT
    assert time_out_game(game.id) is None


def test_time_out_unknown_game_task(global_db: DatabaseSession) -> None:
    assert time_out_game(12345) is None


def test_sweep_expired_games_task(global_db: DatabaseSession, user_id: int) -> None:
    engine = GameEngine(rng=random.Random(2))
    game = engine.create_game(user_id)
    assert sweep_expired_games() == []

    long_ago = datetime.now(pytz.UTC) - timedelta(hours=2)
    with global_db.get_session() as session:
        session.get(models.Game, game.id).created_at = long_ago

    assert sweep_expired_games() == [game.id]
    assert engine.get_game(game.id).status is GameStatus.TIMEOUT
