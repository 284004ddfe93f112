"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from rookery.core.types import Square, parse_square


@dataclass(frozen=True, slots=True)
class Move:
    """A candidate transition from one square to another.

    Validity depends on the board at generation time; a move carries no
    promotion piece because pawns reaching the last row always become queens.
    """

    from_sq: Square
    to_sq: Square

    def __str__(self) -> str:
        return f"{self.from_sq}{self.to_sq}"

    @classmethod
    def from_uci(cls, text: str) -> Move:
        """Parse coordinate notation, e.g. 'e2e4'."""
        if len(text) != 4:
            raise ValueError(f"Invalid move text: {text!r}")
        return cls(parse_square(text[:2]), parse_square(text[2:]))
