"""Game state machine — move execution, history / undo and turn tracking."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from rookery.core.board import Board
from rookery.core.enums import Color, MoveOutcome, PieceType
from rookery.core.move import Move
from rookery.core.move_generator import MoveGenerator
from rookery.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from rookery.core.piece import Piece
from rookery.core.rules import Rules
from rookery.core.types import Square
from rookery.game.interfaces import GamePhase

_LOGGER = logging.getLogger(__name__)

# Farthest row for each side's pawns.
_PROMOTION_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}


class NoHistoryError(Exception):
    """Raised when undo is requested but no move has been played."""


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single reversible entry in the move history.

    ``moved_piece`` is the piece as it stood on ``from_sq`` before the move
    (a pawn, even if it was promoted on arrival).
    """

    from_sq: Square
    to_sq: Square
    moved_piece: Piece
    captured_piece: Piece | None
    outcome: MoveOutcome = MoveOutcome.NORMAL

    @property
    def move(self) -> Move:
        return Move(self.from_sq, self.to_sq)

    @property
    def was_capture(self) -> bool:
        return self.captured_piece is not None

    @property
    def was_promotion(self) -> bool:
        return (
            self.moved_piece.is_pawn
            and self.to_sq.row == _PROMOTION_ROW[self.moved_piece.color]
        )


@dataclass(frozen=True, slots=True, eq=False)
class GameSnapshot:
    """Read-only view of the game for rendering.

    Compared and hashed by identity: the board it carries is mutable.
    """

    board: Board
    side_to_move: Color
    phase: GamePhase
    in_check: bool
    winner: Color | None
    selection: Square | None = None
    legal_targets: frozenset[Square] = frozenset()
    status: str = ""
    ply_count: int = 0
    last_move: Move | None = None

    @property
    def fen(self) -> str:
        return position_to_fen(self.board, self.side_to_move)


@dataclass
class GameState:
    """Owns the board, side to move and the history stack.

    This is a pure data/logic class — no UI. Every method that reads or
    mutates the board holds :attr:`lock`, so the simulate-then-revert step of
    legality filtering is never observed half-done by another thread.
    """

    board: Board = field(init=False)
    side_to_move: Color = field(default=Color.WHITE, init=False)
    phase: GamePhase = field(default=GamePhase.WHITE_TO_MOVE, init=False)
    in_check: bool = field(default=False, init=False)
    winner: Color | None = field(default=None, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)
    start_fen: str = field(default=STARTING_FEN, init=False)
    lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self.setup()

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, fen: str | None = None) -> None:
        """Initialise (or reset) the game with a fresh board and empty history."""
        with self.lock:
            if fen is None:
                self.board = Board.initial()
                self.side_to_move = Color.WHITE
                self.start_fen = STARTING_FEN
            else:
                self.board, self.side_to_move = position_from_fen(fen)
                self.start_fen = fen
            self.move_history.clear()
            self._refresh_status()

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move) -> MoveOutcome:
        """Apply a legal move and classify the resulting position.

        Caller is responsible for the legality check (see :meth:`is_legal`).
        Applying moves after checkmate is not refused.
        """
        with self.lock:
            board = self.board
            piece = board[move.from_sq]
            if piece is None:
                raise ValueError(f"No piece on {move.from_sq}")
            if piece.color != self.side_to_move:
                raise ValueError(
                    f"Piece on {move.from_sq} belongs to {piece.color}, "
                    f"but {self.side_to_move} is to move"
                )
            captured = board[move.to_sq]

            board[move.to_sq] = piece
            board[move.from_sq] = None
            if (
                piece.is_pawn
                and move.to_sq.row == _PROMOTION_ROW[piece.color]
            ):
                board[move.to_sq] = Piece(piece.color, PieceType.QUEEN)

            self.side_to_move = self.side_to_move.opposite
            outcome = self._refresh_status()

            self.move_history.append(
                MoveRecord(
                    from_sq=move.from_sq,
                    to_sq=move.to_sq,
                    moved_piece=piece,
                    captured_piece=captured,
                    outcome=outcome,
                )
            )
            _LOGGER.debug("Applied %s -> %s", move, outcome.name)
            return outcome

    def undo_last_move(self) -> MoveRecord:
        """Undo the last move and return its record.

        Raises:
            NoHistoryError: nothing has been played; the state is unchanged.
        """
        with self.lock:
            if not self.move_history:
                raise NoHistoryError("No moves to undo")

            record = self.move_history.pop()
            self.board[record.from_sq] = record.moved_piece
            self.board[record.to_sq] = record.captured_piece
            self.side_to_move = self.side_to_move.opposite
            self._refresh_status()
            _LOGGER.debug("Undid %s", record.move)
            return record

    # ── Legality queries ─────────────────────────────────────────────────

    def legal_moves(self, sq: Square) -> set[Square]:
        """Legal destinations for the piece on *sq* (empty set if none)."""
        with self.lock:
            return MoveGenerator(self.board).legal_moves(sq)

    def generate_legal_moves(self, color: Color | None = None) -> list[Move]:
        """All legal moves for *color* (default: side to move)."""
        with self.lock:
            side = self.side_to_move if color is None else color
            return MoveGenerator(self.board).generate_legal_moves(side)

    def is_legal(self, move: Move) -> bool:
        """Whether *move* is legal for the side to move."""
        if not (move.from_sq.on_board and move.to_sq.on_board):
            return False
        with self.lock:
            piece = self.board[move.from_sq]
            if piece is None or piece.color != self.side_to_move:
                return False
            return move.to_sq in self.legal_moves(move.from_sq)

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.CHECKMATE

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    @property
    def last_move(self) -> Move | None:
        return self.move_history[-1].move if self.move_history else None

    def snapshot(
        self,
        *,
        selection: Square | None = None,
        legal_targets: frozenset[Square] = frozenset(),
        status: str = "",
    ) -> GameSnapshot:
        """Copy of the current state, safe to hand to another thread."""
        with self.lock:
            return GameSnapshot(
                board=self.board.copy(),
                side_to_move=self.side_to_move,
                phase=self.phase,
                in_check=self.in_check,
                winner=self.winner,
                selection=selection,
                legal_targets=legal_targets,
                status=status,
                ply_count=self.ply_count,
                last_move=self.last_move,
            )

    # ── Internal ─────────────────────────────────────────────────────────

    def _refresh_status(self) -> MoveOutcome:
        outcome = Rules.classify(self.board, self.side_to_move)
        self.in_check = outcome != MoveOutcome.NORMAL
        if outcome == MoveOutcome.CHECKMATE:
            self.phase = GamePhase.CHECKMATE
            self.winner = self.side_to_move.opposite
        else:
            self.phase = GamePhase.to_move(self.side_to_move)
            self.winner = None
        return outcome
