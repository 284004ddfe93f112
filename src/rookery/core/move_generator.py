"""Raw and legal move generation + check detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rookery.core.enums import Color, PieceType
from rookery.core.move import Move
from rookery.core.types import ALL_SQUARES, Square, is_on_board

if TYPE_CHECKING:
    from rookery.core.board import Board


# (row delta, col delta)
KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))
QUEEN_DIRS: tuple[tuple[int, int], ...] = ROOK_DIRS + BISHOP_DIRS

# White advances toward row 0, black toward row 7.
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[Square, ...]]:
    targets: dict[Square, tuple[Square, ...]] = {}
    for sq in ALL_SQUARES:
        moves: list[Square] = []
        for dr, dc in offsets:
            ar = sq.row + dr
            ac = sq.col + dc
            if is_on_board(ar, ac):
                moves.append(Square(ar, ac))
        targets[sq] = tuple(moves)
    return targets


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[tuple[Square, ...], ...]]:
    rays_per_square: dict[Square, tuple[tuple[Square, ...], ...]] = {}
    for sq in ALL_SQUARES:
        square_rays: list[tuple[Square, ...]] = []
        for dr, dc in directions:
            ar = sq.row + dr
            ac = sq.col + dc
            ray: list[Square] = []
            while is_on_board(ar, ac):
                ray.append(Square(ar, ac))
                ar += dr
                ac += dc
            square_rays.append(tuple(ray))
        rays_per_square[sq] = tuple(square_rays)
    return rays_per_square


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)


class MoveGenerator:
    """Generates raw and legal moves on a :class:`Board`.

    ``legal_moves`` simulates each candidate on the live board and always
    restores it before returning. Callers sharing the board between threads
    must hold the owning game's lock for the whole call.
    """

    __slots__ = ("_board",)

    def __init__(self, board: Board) -> None:
        self._board = board

    # -- Public API ---------------------------------------------------------

    def raw_moves(self, sq: Square) -> set[Square]:
        """Destinations allowed by the piece pattern, ignoring king safety.

        An off-board *sq* has no moves.
        """
        if not sq.on_board:
            return set()
        piece = self._board[sq]
        if piece is None:
            return set()

        color = piece.color
        ptype = piece.piece_type
        if ptype == PieceType.PAWN:
            return self._gen_pawn(sq, color)
        if ptype == PieceType.KNIGHT:
            return self._gen_step(_KNIGHT_TARGETS[sq], color)
        if ptype == PieceType.BISHOP:
            return self._gen_sliding(_BISHOP_RAYS[sq], color)
        if ptype == PieceType.ROOK:
            return self._gen_sliding(_ROOK_RAYS[sq], color)
        if ptype == PieceType.QUEEN:
            return self._gen_sliding(_QUEEN_RAYS[sq], color)
        return self._gen_step(_KING_TARGETS[sq], color)

    def legal_moves(self, sq: Square) -> set[Square]:
        """Raw moves of the piece on *sq* that keep its own king safe."""
        return {
            to_sq
            for to_sq in self.raw_moves(sq)
            if not self.would_expose_check(sq, to_sq)
        }

    def generate_legal_moves(self, color: Color) -> list[Move]:
        """All legal moves for *color*, origins in row-major order."""
        moves: list[Move] = []
        for sq, _piece in list(self._board.occupied(color)):
            for to_sq in sorted(self.legal_moves(sq)):
                moves.append(Move(sq, to_sq))
        return moves

    def has_legal_move(self, color: Color) -> bool:
        """Whether any piece of *color* has at least one legal move."""
        origins = [sq for sq, _piece in self._board.occupied(color)]
        return any(self.legal_moves(sq) for sq in origins)

    # -- Check detection ----------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by any raw move of the opponent?

        A board without a king for *color* is never in check.
        """
        king_sq = self._board.king_square(color)
        if king_sq is None:
            return False
        for sq, _piece in self._board.occupied(color.opposite):
            if king_sq in self.raw_moves(sq):
                return True
        return False

    def would_expose_check(self, from_sq: Square, to_sq: Square) -> bool:
        """Would moving the piece on *from_sq* to *to_sq* leave its king attacked?"""
        board = self._board
        piece = board[from_sq]
        if piece is None:
            raise ValueError(f"No piece on {from_sq}")
        captured = board[to_sq]

        board[to_sq] = piece
        board[from_sq] = None
        try:
            return self.is_in_check(piece.color)
        finally:
            board[from_sq] = piece
            board[to_sq] = captured

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, color: Color) -> set[Square]:
        board = self._board
        moves: set[Square] = set()
        direction = PAWN_DIRECTION[color]

        ahead = sq.row + direction
        if is_on_board(ahead, sq.col) and board.is_empty(Square(ahead, sq.col)):
            moves.add(Square(ahead, sq.col))
            if sq.row == PAWN_START_ROW[color]:
                two_step = Square(sq.row + 2 * direction, sq.col)
                if board.is_empty(two_step):
                    moves.add(two_step)

        for dc in (-1, 1):
            if not is_on_board(ahead, sq.col + dc):
                continue
            cap_sq = Square(ahead, sq.col + dc)
            target = board[cap_sq]
            if target is not None and target.color != color:
                moves.add(cap_sq)
        return moves

    def _gen_step(self, targets: tuple[Square, ...], color: Color) -> set[Square]:
        board = self._board
        moves: set[Square] = set()
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.add(to_sq)
        return moves

    def _gen_sliding(
        self,
        rays: tuple[tuple[Square, ...], ...],
        color: Color,
    ) -> set[Square]:
        board = self._board
        moves: set[Square] = set()
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.add(to_sq)
                    continue
                if target.color != color:
                    moves.add(to_sq)
                break
        return moves
