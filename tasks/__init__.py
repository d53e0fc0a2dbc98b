"""
Celery tasks module for the Millionaire game engine.
Contains background tasks that time out expired games.
"""
from tasks.celery_app import celery_app
from tasks.game_timeout import time_out_game, sweep_expired_games

__all__ = [
    "celery_app",
    "time_out_game",
    "sweep_expired_games",
]
