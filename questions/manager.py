"""
Question manager - draws the ordered question set for a new game.
"""
from typing import Dict, List, Optional, Sequence

from database.session import DatabaseSession, get_db_session
from database.queries import QuestionQueries
from game.prizes import PRIZE_TABLE
from game.question import Question
from utils.errors import InsufficientQuestions
from utils.logging import get_logger
from utils.retry import database_retry
import config

logger = get_logger(__name__)


class QuestionManager:
    """Question bank backed by the questions table."""

    def __init__(self, db: Optional[DatabaseSession] = None):
        """Initialize question manager."""
        self.config = config.config
        self.db = db or get_db_session()

    @database_retry
    def draw_ordered_set(self, count: int = len(PRIZE_TABLE)) -> List[Question]:
        """
        Draw one random question for every level 0..count-1.

        Args:
            count: Number of levels to cover

        Returns:
            Questions ordered by level

        Raises:
            InsufficientQuestions: some level has no question
        """
        with self.db.get_session() as session:
            rows = [
                QuestionQueries.get_random_question_for_level(session, level)
                for level in range(count)
            ]
            missing = [level for level, row in enumerate(rows) if row is None]
            if missing:
                logger.error(f"Cannot draw {count} questions, empty levels: {missing}")
                raise InsufficientQuestions(
                    f"No questions for levels {missing}",
                    details={"missing_levels": missing, "count": count}
                )
            questions = [QuestionQueries.to_domain(row) for row in rows]

        logger.debug(f"Drew questions {[q.id for q in questions]}")
        return questions

    def add_question(
        self,
        level: int,
        text: str,
        answers: Sequence[str],
        correct_index: int = 0
    ) -> Question:
        """Add a question to the bank."""
        with self.db.get_session() as session:
            row = QuestionQueries.add_question(session, level, text, answers, correct_index)
            return QuestionQueries.to_domain(row)

    def count_by_level(self) -> Dict[int, int]:
        """Number of stored questions per level."""
        with self.db.get_session() as session:
            return QuestionQueries.count_by_level(session)
