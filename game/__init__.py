"""
Game module for the Millionaire game engine.
Contains the prize table, questions, hints and the game state machine.
The storage-backed GameEngine lives in game.engine.
"""
from game.prizes import PrizeTable, PrizeLevel, PRIZE_TABLE
from game.question import Question
from game.hints import HintKind, HelpHash
from game.game_question import GameQuestion, LETTERS
from game.session import Game, GameStatus, create_game

__all__ = [
    "PrizeTable",
    "PrizeLevel",
    "PRIZE_TABLE",
    "Question",
    "HintKind",
    "HelpHash",
    "GameQuestion",
    "LETTERS",
    "Game",
    "GameStatus",
    "create_game",
]
