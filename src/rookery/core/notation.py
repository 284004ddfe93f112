"""Board placement parsing and serialization (FEN piece placement + side)."""

from __future__ import annotations

from rookery.core.board import Board
from rookery.core.enums import Color
from rookery.core.piece import Piece
from rookery.core.types import Square

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w"


def position_from_fen(fen: str) -> tuple[Board, Color]:
    """Parse a FEN string into a board and the side to move.

    Only the placement and side-to-move fields are read; castling, en passant
    and clock fields may be present and are ignored.
    """
    parts = fen.split()
    if not (2 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 2-6 fields): {fen!r}")

    placement, side_part = parts[:2]

    # 1. Piece placement, first rank listed is row 0
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for row, rank_text in enumerate(ranks):
        col = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                col += step
            else:
                if col >= 8:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                board[Square(row, col)] = Piece.from_char(ch)
                col += 1
            if col > 8:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if col != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    return board, side


def position_to_fen(board: Board, side_to_move: Color) -> str:
    """Serialize *board* and *side_to_move* to a two-field FEN string."""
    ranks: list[str] = []
    for row in range(8):
        empty = 0
        text = ""
        for col in range(8):
            piece = board[Square(row, col)]
            if piece is None:
                empty += 1
                continue
            if empty:
                text += str(empty)
                empty = 0
            text += str(piece)
        if empty:
            text += str(empty)
        ranks.append(text)
    side = "w" if side_to_move == Color.WHITE else "b"
    return f"{'/'.join(ranks)} {side}"
