"""
Database session management.
"""
from contextlib import contextmanager
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool
import config


def _is_in_memory(database_url: str) -> bool:
    return make_url(database_url).database in (None, "", ":memory:")


class DatabaseSession:
    """Database session manager class."""

    def __init__(self, database_url: str):
        """Initialize database engine and session factory."""
        if database_url.startswith("sqlite") and _is_in_memory(database_url):
            # Single shared connection so in-memory databases survive between sessions
            engine_options = {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        elif database_url.startswith("sqlite"):
            engine_options = {"connect_args": {"check_same_thread": False}}
        else:
            engine_options = {
                "poolclass": QueuePool,
                "pool_size": config.config.DATABASE_POOL_SIZE,
                "max_overflow": config.config.DATABASE_MAX_OVERFLOW,
                "pool_pre_ping": True,
            }
        self.engine = create_engine(
            database_url,
            echo=config.config.DATABASE_ECHO,
            **engine_options
        )
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine
        )

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_tables(self):
        """Create all database tables."""
        from database.models import Base
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self):
        """Drop all database tables."""
        from database.models import Base
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()


# Global database session instance
_db_session: DatabaseSession | None = None


def get_db_session() -> DatabaseSession:
    """Get or create global database session instance."""
    global _db_session
    if _db_session is None:
        config.config.validate()
        _db_session = DatabaseSession(config.config.DATABASE_URL)
    return _db_session


@contextmanager
def db_session() -> Generator[Session, None, None]:
    """Context manager for database session."""
    db = get_db_session()
    with db.get_session() as session:
        yield session
