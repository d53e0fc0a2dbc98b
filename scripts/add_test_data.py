#!/usr/bin/env python
"""
Script to add test data to database.
Creates a demo player and enough questions to start games at every level.
"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from database.session import db_session
from database.models import User
from database.queries import QuestionQueries, UserQueries
from game.prizes import PRIZE_TABLE
from utils.logging import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)

QUESTIONS_PER_LEVEL = 3

# A handful of real questions; remaining slots are filled with arithmetic ones
SAMPLE_QUESTIONS = [
    {'level': 0, 'text': 'What colour do you get by mixing blue and yellow?',
     'answers': ['Green', 'Purple', 'Orange', 'Brown']},
    {'level': 1, 'text': 'How many legs does a spider have?',
     'answers': ['Eight', 'Six', 'Ten', 'Twelve']},
    {'level': 2, 'text': 'Which planet is closest to the Sun?',
     'answers': ['Mercury', 'Venus', 'Earth', 'Mars']},
    {'level': 4, 'text': 'Who wrote "War and Peace"?',
     'answers': ['Leo Tolstoy', 'Fyodor Dostoevsky', 'Anton Chekhov', 'Ivan Turgenev']},
    {'level': 7, 'text': 'What is the chemical symbol of tungsten?',
     'answers': ['W', 'Tu', 'Tn', 'Wf']},
    {'level': 14, 'text': 'In which year was the Peace of Westphalia signed?',
     'answers': ['1648', '1618', '1713', '1598']},
]


def arithmetic_question(level: int, seed: int) -> dict:
    """Generated question whose difficulty grows with level."""
    a = (level + 2) * 7 + seed
    b = (level + 1) * 13 + seed * 3
    correct = a * b
    return {
        'level': level,
        'text': f'How much is {a} x {b}?',
        'answers': [str(correct), str(correct + 10), str(correct - a), str(correct + b)],
    }


def create_questions(session) -> int:
    """Top up every level to QUESTIONS_PER_LEVEL questions."""
    counts = QuestionQueries.count_by_level(session)
    created = 0
    pending = list(SAMPLE_QUESTIONS)
    for level in range(len(PRIZE_TABLE)):
        missing = QUESTIONS_PER_LEVEL - counts.get(level, 0)
        level_samples = [q for q in pending if q['level'] == level]
        for seed in range(max(missing, 0)):
            data = level_samples.pop() if level_samples else arithmetic_question(level, seed)
            QuestionQueries.add_question(session, data['level'], data['text'], data['answers'])
            created += 1
        logger.info(f"Level {level}: {max(missing, 0)} questions added")
    return created


def create_demo_user(session) -> User:
    """Create the demo player unless present."""
    user = session.query(User).filter(User.name == 'Demo Player').first()
    if user:
        logger.info(f"Demo user already exists: id={user.id}")
        return user
    user = UserQueries.create_user(session, 'Demo Player')
    logger.info(f"Created demo user: id={user.id}")
    return user


def main():
    """Add test data."""
    logger.info("Adding test data...")
    with db_session() as session:
        created = create_questions(session)
        create_demo_user(session)
    logger.info(f"Test data added: {created} questions")


if __name__ == "__main__":
    main()
