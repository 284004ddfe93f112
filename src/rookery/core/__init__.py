"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from rookery.core import Board, MoveGenerator, parse_square

    board = Board.initial()
    gen = MoveGenerator(board)
    print(sorted(gen.legal_moves(parse_square("g1"))))
"""

from rookery.core.board import Board
from rookery.core.enums import Color, MoveOutcome, PieceType
from rookery.core.move import Move
from rookery.core.move_generator import MoveGenerator
from rookery.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from rookery.core.piece import Piece
from rookery.core.rules import Rules
from rookery.core.types import (
    ALL_SQUARES,
    Square,
    is_on_board,
    make_square,
    parse_square,
    square_name,
)

__all__ = [
    # Enums
    "Color",
    "MoveOutcome",
    "PieceType",
    # Types / helpers
    "ALL_SQUARES",
    "Square",
    "is_on_board",
    "make_square",
    "parse_square",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Piece",
    "Rules",
    # Placement notation
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
]
