"""
Game question - one question as played inside one game.
"""
import copy
import random
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from game.hints import HelpHash, HintKind, generate_hint
from game.question import Question, ANSWERS_PER_QUESTION
from utils.errors import HintAlreadyUsed
from utils.logging import get_logger

logger = get_logger(__name__)

LETTERS = ("a", "b", "c", "d")


def shuffled_answer_order(rng=random) -> Dict[str, int]:
    """Random bijection letter -> answer position."""
    positions = list(range(ANSWERS_PER_QUESTION))
    rng.shuffle(positions)
    return dict(zip(LETTERS, positions))


class GameQuestion:
    """
    A question bound to a game.

    The letter order is fixed when the object is built and never reshuffled,
    so ``variants`` and ``correct_answer_key`` are stable across reads.
    ``help_hash`` only ever grows, one entry per hint kind.
    """

    def __init__(
        self,
        question: Question,
        answer_order: Optional[Mapping[str, int]] = None,
        help_hash: Optional[Mapping[str, Any]] = None,
        rng=None
    ):
        """
        Args:
            question: The underlying question
            answer_order: Letter -> answer position; shuffled when omitted
            help_hash: Previously stored hint payloads (when loading)
            rng: Random source used for shuffling
        """
        if answer_order is None:
            answer_order = shuffled_answer_order(rng or random)
        answer_order = {str(letter).lower(): int(pos) for letter, pos in answer_order.items()}
        if sorted(answer_order) != list(LETTERS) or sorted(answer_order.values()) != list(range(ANSWERS_PER_QUESTION)):
            raise ValueError(f"answer_order must map {LETTERS} onto positions 0-3, got {answer_order}")

        unknown = set(help_hash or {}) - {kind.value for kind in HintKind}
        if unknown:
            raise ValueError(f"Unknown hint kinds in help_hash: {sorted(unknown)}")

        self.question = question
        self._answer_order = MappingProxyType(answer_order)
        self._variants = MappingProxyType(
            {letter: question.answers[answer_order[letter]] for letter in LETTERS}
        )
        self._correct_key = next(
            letter for letter in LETTERS if answer_order[letter] == question.correct_index
        )
        self._help_hash: HelpHash = copy.deepcopy(dict(help_hash or {}))

    def __repr__(self):
        return (
            f"GameQuestion(question_id={self.question.id}, level={self.level}, "
            f"correct={self._correct_key!r}, hints={sorted(self._help_hash)})"
        )

    @property
    def level(self) -> int:
        return self.question.level

    @property
    def text(self) -> str:
        return self.question.text

    @property
    def answer_order(self) -> Mapping[str, int]:
        """Letter -> position of the answer in the underlying question."""
        return self._answer_order

    @property
    def variants(self) -> Mapping[str, str]:
        """Letter -> answer text."""
        return self._variants

    @property
    def correct_answer_key(self) -> str:
        return self._correct_key

    @property
    def help_hash(self) -> HelpHash:
        """Copy of the hint payloads recorded so far."""
        return copy.deepcopy(self._help_hash)

    def is_correct(self, letter) -> bool:
        """Check an answer letter; anything that is not a/b/c/d is wrong."""
        if not isinstance(letter, str):
            return False
        return letter.strip().lower() == self._correct_key

    def has_hint(self, kind) -> bool:
        return HintKind.parse(kind).value in self._help_hash

    def add_hint(self, kind, rng=None):
        """
        Generate and record a hint.

        Args:
            kind: HintKind or its string value
            rng: Random source for the generator

        Returns:
            The hint payload

        Raises:
            UnknownHintKind: kind is not recognized
            HintAlreadyUsed: kind was already used on this question
        """
        kind = HintKind.parse(kind)
        if kind.value in self._help_hash:
            raise HintAlreadyUsed(
                f"Hint {kind.value} already used for question {self.question.id}",
                details={"kind": kind.value, "question_id": self.question.id}
            )

        payload = generate_hint(kind, LETTERS, self._correct_key, rng or random)
        self._help_hash[kind.value] = payload
        logger.debug(f"Hint {kind.value} added to question {self.question.id}: {payload}")
        return copy.deepcopy(payload)
