"""Pieces and their one-letter placement codes."""

from __future__ import annotations

from dataclasses import dataclass

from rookery.core.enums import Color, PieceType

# Black letters; white pieces use the uppercase form.
_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
_TYPES_BY_LETTER: dict[str, PieceType] = {v: k for k, v in _LETTERS.items()}


@dataclass(frozen=True, slots=True)
class Piece:
    """A colored piece.

    Promotion puts a new queen in the board slot; a pawn value is never
    changed in place, so history records keep the piece that moved.
    """

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        letter = _LETTERS[self.piece_type]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Decode a placement letter: 'N' is a white knight, 'q' a black queen."""
        piece_type = _TYPES_BY_LETTER.get(char.lower()) if len(char) == 1 else None
        if piece_type is None:
            raise ValueError(f"Invalid piece character: {char!r}")
        return cls(Color.WHITE if char.isupper() else Color.BLACK, piece_type)

    @property
    def label(self) -> str:
        """Name used in status messages, e.g. 'knight'."""
        return str(self.piece_type)

    @property
    def is_pawn(self) -> bool:
        return self.piece_type == PieceType.PAWN
