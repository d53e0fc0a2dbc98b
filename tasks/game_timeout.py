"""
Game timeout tasks - end games whose time limit has passed.
"""
from typing import Any, Dict, List, Optional
from tasks.celery_app import celery_app
from utils.errors import GameAlreadyFinished, GameNotFound
from utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="tasks.game_timeout.time_out_game")
def time_out_game(game_id: int) -> Optional[Dict[str, Any]]:
    """
    Time out a single game.

    Args:
        game_id: Game ID

    Returns:
        The game's final status and prize, or None if it was already over
    """
    from game.engine import GameEngine

    try:
        result = GameEngine().time_out(game_id)
    except GameAlreadyFinished as e:
        logger.info(f"Game {game_id} not timed out: {e.message}")
        return None
    except GameNotFound as e:
        logger.warning(e.message)
        return None

    logger.info(f"Game {game_id} timed out with prize {result['prize']}")
    return result


@celery_app.task(name="tasks.game_timeout.sweep_expired_games")
def sweep_expired_games() -> List[int]:
    """Time out every in-progress game past its time limit."""
    from game.engine import GameEngine

    return GameEngine().expire_timed_out_games()
