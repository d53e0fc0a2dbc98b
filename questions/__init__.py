"""
Question bank for the Millionaire game engine.
"""
from questions.manager import QuestionManager

__all__ = ["QuestionManager"]
