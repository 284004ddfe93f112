"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterator

from rookery.core.enums import Color, PieceType
from rookery.core.piece import Piece
from rookery.core.types import Square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 8x8 grid of optional pieces, indexed by :class:`Square`."""

    __slots__ = ("_grid",)

    def __init__(self) -> None:
        self._grid: list[list[Piece | None]] = [[None] * 8 for _ in range(8)]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._grid[sq.row][sq.col]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        self._grid[sq.row][sq.col] = piece

    def is_empty(self, sq: Square) -> bool:
        return self._grid[sq.row][sq.col] is None

    # -- Query helpers ------------------------------------------------------

    def occupied(self, color: Color | None = None) -> Iterator[tuple[Square, Piece]]:
        """Yield ``(square, piece)`` pairs in row-major order.

        With *color* given, only that side's pieces are yielded.
        """
        for row, cells in enumerate(self._grid):
            for col, piece in enumerate(cells):
                if piece is None:
                    continue
                if color is not None and piece.color != color:
                    continue
                yield Square(row, col), piece

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return [
            sq for sq, piece in self.occupied(color) if piece.piece_type == piece_type
        ]

    def king_square(self, color: Color) -> Square | None:
        """Square of *color*'s king, or ``None`` when it is missing."""
        for sq, piece in self.occupied(color):
            if piece.piece_type == PieceType.KING:
                return sq
        return None

    def piece_count(self) -> int:
        return sum(1 for _ in self.occupied())

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._grid = [row.copy() for row in self._grid]
        return b

    def clear(self) -> None:
        self._grid = [[None] * 8 for _ in range(8)]

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position (black on rows 0-1, white on rows 6-7)."""
        b = cls()
        for col, pt in enumerate(_BACK_RANK):
            b[Square(0, col)] = Piece(Color.BLACK, pt)
            b[Square(1, col)] = Piece(Color.BLACK, PieceType.PAWN)
            b[Square(6, col)] = Piece(Color.WHITE, PieceType.PAWN)
            b[Square(7, col)] = Piece(Color.WHITE, pt)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        rows: list[str] = []
        for row, cells in enumerate(self._grid):
            text = " ".join(str(p) if p else "." for p in cells)
            rows.append(f"{8 - row} {text}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
