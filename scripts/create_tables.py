#!/usr/bin/env python
"""
Script to create (or recreate) the game database tables.
"""
import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from database.session import get_db_session
from utils.logging import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)


def main():
    """Create database tables."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    args = parser.parse_args()

    db = get_db_session()
    if args.drop:
        logger.warning("Dropping all game tables...")
        db.drop_tables()

    logger.info("Creating database tables...")
    db.create_tables()
    logger.info("Database tables created successfully!")


if __name__ == "__main__":
    main()
