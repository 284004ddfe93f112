"""Square value object and coordinate helpers.

Board layout (row-major, black at the top):
    row 0 = rank 8 (black back rank), row 7 = rank 1 (white back rank)
    col 0 = file a, col 7 = file h

    a8=(0, 0), b8=(0, 1), ..., h8=(0, 7)
    ...
    a1=(7, 0), b1=(7, 1), ..., h1=(7, 7)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class Square:
    """A board coordinate, also used as a move endpoint."""

    row: int
    col: int

    def __str__(self) -> str:
        return square_name(self)

    @property
    def name(self) -> str:
        """Algebraic name, e.g. ``Square(6, 4)`` → 'e2'."""
        return square_name(self)

    @property
    def on_board(self) -> bool:
        return is_on_board(self.row, self.col)


def is_on_board(row: int, col: int) -> bool:
    """Whether (*row*, *col*) lies inside the 8x8 board."""
    return 0 <= row < 8 and 0 <= col < 8


def make_square(row: int, col: int) -> Square:
    """Create a square, rejecting off-board coordinates."""
    if not is_on_board(row, col):
        raise ValueError(f"Square out of bounds: ({row}, {col})")
    return Square(row, col)


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. (0, 0) → 'a8', (7, 7) → 'h1'."""
    return chr(ord("a") + sq.col) + str(8 - sq.row)


def parse_square(name: str) -> Square:
    """Parse square name, e.g. 'e4' → Square(4, 4)."""
    if len(name) != 2 or name[0] not in "abcdefgh" or name[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return Square(8 - int(name[1]), ord(name[0]) - ord("a"))


ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(row, col) for row in range(8) for col in range(8)
)


# ── Named square constants ──────────────────────────────────────────────────

A8, B8, C8, D8, E8, F8, G8, H8 = (Square(0, c) for c in range(8))
A7, B7, C7, D7, E7, F7, G7, H7 = (Square(1, c) for c in range(8))
A6, B6, C6, D6, E6, F6, G6, H6 = (Square(2, c) for c in range(8))
A5, B5, C5, D5, E5, F5, G5, H5 = (Square(3, c) for c in range(8))
A4, B4, C4, D4, E4, F4, G4, H4 = (Square(4, c) for c in range(8))
A3, B3, C3, D3, E3, F3, G3, H3 = (Square(5, c) for c in range(8))
A2, B2, C2, D2, E2, F2, G2, H2 = (Square(6, c) for c in range(8))
A1, B1, C1, D1, E1, F1, G1, H1 = (Square(7, c) for c in range(8))
