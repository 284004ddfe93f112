"""High-level chess rules: check and checkmate classification."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rookery.core.enums import Color, MoveOutcome
from rookery.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from rookery.core.board import Board


class Rules:
    """Static rule-checker that operates on a :class:`Board`."""

    # Product policy: no stalemate or draw detection. A side that is not in
    # check and has no legal move is simply reported as NORMAL.

    @staticmethod
    def is_in_check(board: Board, color: Color) -> bool:
        return MoveGenerator(board).is_in_check(color)

    @staticmethod
    def is_checkmate(board: Board, color: Color) -> bool:
        gen = MoveGenerator(board)
        if not gen.is_in_check(color):
            return False
        return not gen.has_legal_move(color)

    @staticmethod
    def classify(board: Board, side_to_move: Color) -> MoveOutcome:
        """Status of *side_to_move* on *board*."""
        gen = MoveGenerator(board)
        if not gen.is_in_check(side_to_move):
            return MoveOutcome.NORMAL
        if gen.has_legal_move(side_to_move):
            return MoveOutcome.CHECK
        return MoveOutcome.CHECKMATE
