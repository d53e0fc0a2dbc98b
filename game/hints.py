"""
Hint engine - generates 50/50, audience and friend-call hints.

The generators are pure: they take the answer letters, the correct letter
and a random source, and return the hint payload. Bookkeeping of which hints
were already used lives in GameQuestion and Game.
"""
from enum import Enum
from typing import Dict, List, Optional, Sequence, TypedDict
import random

from utils.errors import UnknownHintKind
import config

FRIEND_NAMES = (
    "Vasily Petrovich",
    "Aunt Lyuba",
    "Professor Lebedev",
    "Your neighbour Oleg",
    "Grandma Zina",
    "Coach Semyonov",
)


class HintKind(str, Enum):
    """Hint kinds, each usable once per game."""
    FIFTY_FIFTY = "fifty_fifty"
    AUDIENCE_HELP = "audience_help"
    FRIEND_CALL = "friend_call"

    @classmethod
    def parse(cls, value) -> "HintKind":
        """Convert a user-supplied value to a HintKind or raise UnknownHintKind."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownHintKind(
                f"Unknown hint kind: {value!r}",
                details={"kind": value, "allowed": [k.value for k in cls]}
            ) from None


class HelpHash(TypedDict, total=False):
    """Hint payloads of one game question, keyed by HintKind value."""
    fifty_fifty: List[str]
    audience_help: Dict[str, int]
    friend_call: str


def fifty_fifty(letters: Sequence[str], correct_key: str, rng=random) -> List[str]:
    """Keep the correct letter and one random wrong letter."""
    wrong = [letter for letter in letters if letter != correct_key]
    kept_wrong = rng.choice(wrong)
    return sorted([correct_key, kept_wrong])


def audience_help(
    letters: Sequence[str],
    correct_key: str,
    rng=random,
    audience_size: Optional[int] = None,
    correct_bias: Optional[float] = None
) -> Dict[str, int]:
    """
    Simulate an audience vote.

    Each voter knows the answer with probability ``correct_bias`` and
    otherwise guesses uniformly among all letters, so the correct letter
    leads on average without being guaranteed to.
    """
    if audience_size is None:
        audience_size = config.config.AUDIENCE_SIZE
    if correct_bias is None:
        correct_bias = config.config.AUDIENCE_CORRECT_BIAS

    votes = {letter: 0 for letter in letters}
    for _ in range(audience_size):
        if rng.random() < correct_bias:
            votes[correct_key] += 1
        else:
            votes[rng.choice(letters)] += 1
    return votes


def friend_call(
    letters: Sequence[str],
    correct_key: str,
    rng=random,
    accuracy: Optional[float] = None,
    friends: Sequence[str] = FRIEND_NAMES
) -> str:
    """Return a friend's statement naming the letter they believe is right."""
    if accuracy is None:
        accuracy = config.config.FRIEND_CALL_ACCURACY

    if rng.random() < accuracy:
        guess = correct_key
    else:
        guess = rng.choice([letter for letter in letters if letter != correct_key])
    friend = rng.choice(friends)
    return f"{friend} thinks the answer is {guess.upper()}"


GENERATORS = {
    HintKind.FIFTY_FIFTY: fifty_fifty,
    HintKind.AUDIENCE_HELP: audience_help,
    HintKind.FRIEND_CALL: friend_call,
}


def generate_hint(kind: HintKind, letters: Sequence[str], correct_key: str, rng=random):
    """Dispatch to the generator for ``kind``."""
    return GENERATORS[HintKind.parse(kind)](letters, correct_key, rng)
