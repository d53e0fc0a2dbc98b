"""
Celery application configuration.
"""
from celery import Celery
import config


def create_celery_app() -> Celery:
    """Create and configure Celery application."""
    celery_app = Celery(
        "millionaire",
        broker=config.config.CELERY_BROKER_URL,
        backend=config.config.CELERY_RESULT_BACKEND,
        include=[
            "tasks.game_timeout",
        ]
    )

    celery_app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_track_started=True,
        task_time_limit=5 * 60,
        task_soft_time_limit=4 * 60,
        worker_prefetch_multiplier=1,
        worker_max_tasks_per_child=50,
        broker_connection_retry_on_startup=True,
        beat_schedule={
            "sweep-expired-games": {
                "task": "tasks.game_timeout.sweep_expired_games",
                "schedule": float(config.config.TIMEOUT_SWEEP_INTERVAL),
            },
        },
    )

    return celery_app


# Create global Celery app instance
celery_app = create_celery_app()
