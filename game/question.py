"""
Question - read-only question record as drawn from the question bank.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

ANSWERS_PER_QUESTION = 4


@dataclass(frozen=True)
class Question:
    """A leveled question with four answers and the index of the correct one."""
    id: Optional[int]
    level: int
    text: str
    answers: Tuple[str, str, str, str]
    correct_index: int

    def __post_init__(self):
        # Frozen dataclass: normalise lists passed by callers
        object.__setattr__(self, "answers", tuple(self.answers))
        if len(self.answers) != ANSWERS_PER_QUESTION:
            raise ValueError(
                f"Question {self.id} must have {ANSWERS_PER_QUESTION} answers, got {len(self.answers)}"
            )
        if self.correct_index is None or not 0 <= self.correct_index < ANSWERS_PER_QUESTION:
            raise ValueError(f"Question {self.id} has invalid correct_index {self.correct_index!r}")
        if self.level is None or self.level < 0:
            raise ValueError(f"Question {self.id} has invalid level {self.level!r}")

    @property
    def correct_answer(self) -> str:
        return self.answers[self.correct_index]
