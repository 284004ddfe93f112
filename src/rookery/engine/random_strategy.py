"""Uniform random legal-move strategy."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from rookery.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from rookery.core.board import Board
    from rookery.core.enums import Color
    from rookery.core.move import Move


class RandomStrategy:
    """Picks one of *color*'s legal moves uniformly at random.

    Args:
        seed: Seed for a private ``random.Random``; ignored if *rng* is given.
        rng: Random source to draw from.
    """

    __slots__ = ("_rng",)

    def __init__(self, seed: int | None = None, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random(seed)

    def select_move(self, color: Color, board: Board) -> Move | None:
        moves = MoveGenerator(board).generate_legal_moves(color)
        if not moves:
            return None
        return self._rng.choice(moves)
