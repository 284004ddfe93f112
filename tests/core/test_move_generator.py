"""Tests for raw / legal move generation and check detection."""

import random

import pytest

from rookery.core.board import Board
from rookery.core.enums import Color, PieceType
from rookery.core.move_generator import KNIGHT_OFFSETS, MoveGenerator
from rookery.core.notation import position_from_fen
from rookery.core.piece import Piece
from rookery.core.types import (
    A1,
    A8,
    ALL_SQUARES,
    B6,
    C7,
    D4,
    D5,
    E1,
    E2,
    E3,
    E4,
    E5,
    E6,
    E7,
    E8,
    F5,
    G1,
    Square,
    is_on_board,
    parse_square,
)
from rookery.game.state import GameState


def _squares(*names: str) -> set[Square]:
    return {parse_square(n) for n in names}


def perft(state: GameState, depth: int) -> int:
    """Count leaf nodes at *depth* using apply/undo."""
    if depth == 0:
        return 1
    nodes = 0
    for move in state.generate_legal_moves():
        state.apply_move(move)
        nodes += perft(state, depth - 1)
        state.undo_last_move()
    return nodes


# ── Knight ───────────────────────────────────────────────────────────────────


class TestKnight:
    @pytest.mark.parametrize("sq", ALL_SQUARES, ids=str)
    def test_empty_board_offsets(self, sq: Square, empty_board: Board) -> None:
        empty_board[sq] = Piece(Color.WHITE, PieceType.KNIGHT)
        expected = {
            Square(sq.row + dr, sq.col + dc)
            for dr, dc in KNIGHT_OFFSETS
            if is_on_board(sq.row + dr, sq.col + dc)
        }
        assert MoveGenerator(empty_board).legal_moves(sq) == expected

    def test_corner(self, empty_board: Board) -> None:
        empty_board[A8] = Piece(Color.BLACK, PieceType.KNIGHT)
        assert MoveGenerator(empty_board).legal_moves(A8) == {B6, C7}

    def test_starting_knight(self) -> None:
        gen = MoveGenerator(Board.initial())
        assert gen.legal_moves(G1) == _squares("f3", "h3")

    def test_cannot_land_on_own_piece(self, empty_board: Board) -> None:
        empty_board[D4] = Piece(Color.WHITE, PieceType.KNIGHT)
        empty_board[parse_square("e6")] = Piece(Color.WHITE, PieceType.PAWN)
        empty_board[parse_square("c6")] = Piece(Color.BLACK, PieceType.PAWN)
        moves = MoveGenerator(empty_board).raw_moves(D4)
        assert parse_square("e6") not in moves
        assert parse_square("c6") in moves


# ── Pawn ─────────────────────────────────────────────────────────────────────


class TestPawn:
    def test_white_start_single_and_double(self) -> None:
        gen = MoveGenerator(Board.initial())
        assert gen.legal_moves(E2) == {E3, E4}

    def test_black_start_single_and_double(self) -> None:
        gen = MoveGenerator(Board.initial())
        assert gen.legal_moves(E7) == {E6, E5}

    def test_blocked_directly(self, empty_board: Board) -> None:
        empty_board[E2] = Piece(Color.WHITE, PieceType.PAWN)
        empty_board[E3] = Piece(Color.BLACK, PieceType.KNIGHT)
        assert MoveGenerator(empty_board).raw_moves(E2) == set()

    def test_double_step_blocked_on_second_square(self, empty_board: Board) -> None:
        empty_board[E2] = Piece(Color.WHITE, PieceType.PAWN)
        empty_board[E4] = Piece(Color.BLACK, PieceType.KNIGHT)
        assert MoveGenerator(empty_board).raw_moves(E2) == {E3}

    def test_no_double_step_off_start_row(self, empty_board: Board) -> None:
        empty_board[E3] = Piece(Color.WHITE, PieceType.PAWN)
        assert MoveGenerator(empty_board).raw_moves(E3) == {E4}

    def test_captures_only_opponents(self, empty_board: Board) -> None:
        empty_board[E4] = Piece(Color.WHITE, PieceType.PAWN)
        empty_board[D5] = Piece(Color.BLACK, PieceType.PAWN)
        empty_board[F5] = Piece(Color.WHITE, PieceType.PAWN)
        assert MoveGenerator(empty_board).raw_moves(E4) == {E5, D5}

    def test_no_diagonal_move_to_empty(self, empty_board: Board) -> None:
        empty_board[E4] = Piece(Color.WHITE, PieceType.PAWN)
        assert MoveGenerator(empty_board).raw_moves(E4) == {E5}

    def test_black_moves_down_the_board(self, empty_board: Board) -> None:
        empty_board[D5] = Piece(Color.BLACK, PieceType.PAWN)
        empty_board[E4] = Piece(Color.WHITE, PieceType.PAWN)
        assert MoveGenerator(empty_board).raw_moves(D5) == _squares("d4", "e4")

    def test_edge_file_capture_stays_on_board(self, empty_board: Board) -> None:
        sq = parse_square("a4")
        empty_board[sq] = Piece(Color.WHITE, PieceType.PAWN)
        empty_board[parse_square("b5")] = Piece(Color.BLACK, PieceType.ROOK)
        assert MoveGenerator(empty_board).raw_moves(sq) == _squares("a5", "b5")

    def test_pawn_on_last_row_has_no_moves(self, empty_board: Board) -> None:
        empty_board[E8] = Piece(Color.WHITE, PieceType.PAWN)
        assert MoveGenerator(empty_board).raw_moves(E8) == set()


# ── Sliding pieces and king ─────────────────────────────────────────────────


class TestSliding:
    def test_rook_empty_board(self, empty_board: Board) -> None:
        empty_board[A1] = Piece(Color.WHITE, PieceType.ROOK)
        assert len(MoveGenerator(empty_board).raw_moves(A1)) == 14

    def test_bishop_center(self, empty_board: Board) -> None:
        empty_board[D4] = Piece(Color.WHITE, PieceType.BISHOP)
        assert len(MoveGenerator(empty_board).raw_moves(D4)) == 13

    def test_queen_center(self, empty_board: Board) -> None:
        empty_board[D4] = Piece(Color.WHITE, PieceType.QUEEN)
        assert len(MoveGenerator(empty_board).raw_moves(D4)) == 27

    def test_queen_is_rook_plus_bishop(self) -> None:
        board, _ = position_from_fen("8/8/2p5/8/3Q1P2/8/8/8 w")
        gen = MoveGenerator(board)
        queen_moves = gen.raw_moves(D4)
        board[D4] = Piece(Color.WHITE, PieceType.ROOK)
        rook_moves = gen.raw_moves(D4)
        board[D4] = Piece(Color.WHITE, PieceType.BISHOP)
        bishop_moves = gen.raw_moves(D4)
        assert queen_moves == rook_moves | bishop_moves

    def test_ray_stops_at_own_piece(self, empty_board: Board) -> None:
        empty_board[A1] = Piece(Color.WHITE, PieceType.ROOK)
        empty_board[parse_square("a3")] = Piece(Color.WHITE, PieceType.PAWN)
        empty_board[parse_square("c1")] = Piece(Color.BLACK, PieceType.PAWN)
        moves = MoveGenerator(empty_board).raw_moves(A1)
        assert moves == _squares("a2", "b1", "c1")

    def test_starting_rook_has_no_moves(self) -> None:
        assert MoveGenerator(Board.initial()).legal_moves(A1) == set()


class TestKing:
    def test_center(self, empty_board: Board) -> None:
        empty_board[E4] = Piece(Color.WHITE, PieceType.KING)
        assert len(MoveGenerator(empty_board).legal_moves(E4)) == 8

    def test_corner(self, empty_board: Board) -> None:
        empty_board[A1] = Piece(Color.WHITE, PieceType.KING)
        assert MoveGenerator(empty_board).legal_moves(A1) == _squares("a2", "b1", "b2")

    def test_cannot_step_into_attack(self) -> None:
        board, _ = position_from_fen("8/8/8/8/8/8/r7/4K3 w")
        assert MoveGenerator(board).legal_moves(E1) == _squares("d1", "f1")

    def test_no_castling(self) -> None:
        board, _ = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w")
        moves = MoveGenerator(board).legal_moves(E1)
        assert parse_square("g1") not in moves
        assert parse_square("c1") not in moves


# ── Check detection / legality filter ───────────────────────────────────────


class TestCheckDetection:
    def test_start_not_in_check(self) -> None:
        gen = MoveGenerator(Board.initial())
        assert not gen.is_in_check(Color.WHITE)
        assert not gen.is_in_check(Color.BLACK)

    def test_rook_gives_check(self) -> None:
        board, _ = position_from_fen("4r3/8/8/8/8/8/8/4K3 w")
        assert MoveGenerator(board).is_in_check(Color.WHITE)

    def test_blocked_rook_no_check(self) -> None:
        board, _ = position_from_fen("4r3/8/8/8/4N3/8/8/4K3 w")
        assert not MoveGenerator(board).is_in_check(Color.WHITE)

    def test_pawn_gives_check_diagonally(self) -> None:
        board, _ = position_from_fen("8/8/8/8/8/3p4/4K3/8 w")
        assert MoveGenerator(board).is_in_check(Color.WHITE)

    def test_pawn_does_not_check_straight_ahead(self) -> None:
        board, _ = position_from_fen("8/8/8/8/8/4p3/4K3/8 w")
        assert not MoveGenerator(board).is_in_check(Color.WHITE)

    def test_missing_king_is_never_in_check(self) -> None:
        board, _ = position_from_fen("4r3/8/8/8/8/8/8/8 w")
        assert not MoveGenerator(board).is_in_check(Color.WHITE)


class TestLegalityFilter:
    PINNED = "4r3/8/8/8/8/8/4R3/4K3 w"

    def test_pinned_rook_stays_on_file(self) -> None:
        board, _ = position_from_fen(self.PINNED)
        moves = MoveGenerator(board).legal_moves(E2)
        assert moves == _squares("e3", "e4", "e5", "e6", "e7", "e8")

    def test_would_expose_check(self) -> None:
        board, _ = position_from_fen(self.PINNED)
        gen = MoveGenerator(board)
        assert gen.would_expose_check(E2, parse_square("a2"))
        assert not gen.would_expose_check(E2, E8)

    def test_simulation_restores_board(self) -> None:
        board, _ = position_from_fen(self.PINNED)
        before = board.copy()
        captured = board[E8]
        gen = MoveGenerator(board)
        gen.legal_moves(E2)
        gen.would_expose_check(E2, E8)
        assert board == before
        assert board[E8] is captured

    def test_would_expose_check_from_empty_square(self, empty_board: Board) -> None:
        with pytest.raises(ValueError):
            MoveGenerator(empty_board).would_expose_check(E2, E4)

    def test_must_resolve_check(self) -> None:
        # White in check from e8 rook; only blocking on the e-file or
        # stepping off it is legal.
        board, _ = position_from_fen("4r3/8/8/8/8/8/3B4/4K3 w")
        gen = MoveGenerator(board)
        assert gen.legal_moves(parse_square("d2")) == _squares("e3")
        for move in gen.generate_legal_moves(Color.WHITE):
            assert not gen.would_expose_check(move.from_sq, move.to_sq)

    def test_empty_square_has_no_moves(self, empty_board: Board) -> None:
        assert MoveGenerator(empty_board).legal_moves(E4) == set()

    def test_starting_position_has_twenty_moves(self) -> None:
        gen = MoveGenerator(Board.initial())
        assert len(gen.generate_legal_moves(Color.WHITE)) == 20
        assert len(gen.generate_legal_moves(Color.BLACK)) == 20

    def test_king_safety_along_random_games(self) -> None:
        rng = random.Random(1234)
        for _game in range(3):
            state = GameState()
            for _ply in range(60):
                side = state.side_to_move
                moves = state.generate_legal_moves()
                if not moves:
                    break
                for move in moves:
                    board = state.board.copy()
                    board[move.to_sq] = board[move.from_sq]
                    board[move.from_sq] = None
                    assert not MoveGenerator(board).is_in_check(side), str(move)
                state.apply_move(rng.choice(moves))


# ── Perft ────────────────────────────────────────────────────────────────────


class TestPerftStarting:
    def test_depth_1(self) -> None:
        assert perft(GameState(), 1) == 20

    def test_depth_2(self) -> None:
        assert perft(GameState(), 2) == 400

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        assert perft(GameState(), 3) == 8_902

    def test_perft_leaves_state_untouched(self) -> None:
        state = GameState()
        before = state.board.copy()
        perft(state, 2)
        assert state.board == before
        assert state.side_to_move == Color.WHITE
        assert state.ply_count == 0


class TestOffBoardOrigin:
    @pytest.mark.parametrize("sq", [Square(-1, 4), Square(8, 0), Square(0, -1)], ids=repr)
    def test_no_raw_or_legal_moves(self, sq: Square) -> None:
        gen = MoveGenerator(Board.initial())
        assert gen.raw_moves(sq) == set()
        assert gen.legal_moves(sq) == set()
