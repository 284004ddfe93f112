"""GameController — the central orchestrator of a chess game.

Coordinates: Players, GameState, square selection and status messages.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rookery.core.enums import Color, MoveOutcome
from rookery.core.move import Move
from rookery.game.interfaces import GameMode, GamePhase, GameSettings, IPlayer
from rookery.game.player import AIPlayer, HumanPlayer
from rookery.game.state import GameSnapshot, GameState, NoHistoryError

if TYPE_CHECKING:
    from rookery.core.board import Board
    from rookery.core.types import Square
    from rookery.engine.strategy import IStrategy

_LOGGER = logging.getLogger(__name__)

NO_MOVES_STATUS = "Computer has no valid moves!"

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, MoveOutcome, GameState], None]
GameOverCallback = Callable[[Color], None]  # winner
PhaseCallback = Callable[[GamePhase], None]
StatusCallback = Callable[[str], None]
OpponentFactory = Callable[[Color], IPlayer]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_status: list[StatusCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController:
    """Orchestrates a chess game: selection, legality, turns, notifications.

    Illegal requests never raise; they are ignored and reported through the
    return value. Methods are meant to be called from a single thread (the
    main/UI thread); computer moves computed elsewhere arrive through
    :meth:`submit_strategy_move`.
    """

    __slots__ = (
        "_state",
        "_players",
        "_mode",
        "_selection",
        "_legal_targets",
        "_status",
        "events",
    )

    def __init__(self) -> None:
        self._state = GameState()
        self._players: dict[Color, IPlayer] = {}
        self._mode = GameMode.HUMAN
        self._selection: Square | None = None
        self._legal_targets: frozenset[Square] = frozenset()
        self._status = ""
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def mode(self) -> GameMode:
        return self._mode

    @property
    def status(self) -> str:
        return self._status

    @property
    def selection(self) -> Square | None:
        return self._selection

    @property
    def current_player(self) -> IPlayer | None:
        return self._players.get(self._state.side_to_move)

    def player(self, color: Color) -> IPlayer | None:
        return self._players.get(color)

    def set_status(self, message: str) -> None:
        """Publish a status message from outside the controller."""
        self._set_status(message)

    def current_state(self) -> GameSnapshot:
        """Read-only snapshot for rendering."""
        return self._state.snapshot(
            selection=self._selection,
            legal_targets=self._legal_targets,
            status=self._status,
        )

    # ── Game lifecycle ───────────────────────────────────────────────────

    def new_game(
        self,
        white: IPlayer,
        black: IPlayer,
        fen: str | None = None,
    ) -> None:
        """Set up a new game between *white* and *black*.

        Raises:
            ValueError: *fen* is not a valid placement; the current game,
                players included, is left as it was.
        """
        self._state.setup(fen)
        self._cancel_pending_computer_moves()
        self._players = {Color.WHITE: white, Color.BLACK: black}
        self._mode = (
            GameMode.HUMAN if white.is_human and black.is_human else GameMode.COMPUTER
        )
        self._clear_selection()
        _LOGGER.info("New game: %s vs %s (%s)", white.name, black.name, self._mode.name)

        if white.is_human != black.is_human:
            human = Color.WHITE if white.is_human else Color.BLACK
            self._set_status(
                f"Game started. You are {str(human).capitalize()}, "
                f"Computer is {str(human.opposite).capitalize()}."
            )
        else:
            side = str(self._state.side_to_move).capitalize()
            self._set_status(f"Game started. {side} moves first.")

        self._emit_phase(self._state.phase)
        self._prompt_current_player()

    def new_game_from_settings(
        self,
        settings: GameSettings,
        opponent_factory: OpponentFactory | None = None,
        fen: str | None = None,
    ) -> None:
        """Create players according to *settings* and start a game.

        In computer mode *opponent_factory* builds the computer player (e.g.
        ``StrategySession.create_ai_player``). Without one, the configured
        strategy is run synchronously when the computer is prompted.
        """
        if settings.mode == GameMode.HUMAN:
            self.new_game(HumanPlayer(Color.WHITE), HumanPlayer(Color.BLACK), fen)
            return

        computer_color = settings.computer_color
        if opponent_factory is not None:
            computer = opponent_factory(computer_color)
        else:
            from rookery.engine.strategy import create_strategy

            strategy = create_strategy(settings.strategy, settings.seed)
            computer = AIPlayer(
                computer_color,
                on_request_move=lambda color, board: self.submit_strategy_move(
                    color, strategy.select_move(color, board)
                ),
            )
        human = HumanPlayer(computer_color.opposite, "You")
        if computer_color == Color.WHITE:
            self.new_game(computer, human, fen)
        else:
            self.new_game(human, computer, fen)

    def reset(self) -> None:
        """Fresh board, empty history, white to move; players are kept."""
        self._cancel_pending_computer_moves()
        self._state.setup()
        self._clear_selection()
        _LOGGER.info("Game reset")
        self._set_status("Game reset. White moves first.")
        self._emit_phase(self._state.phase)
        self._prompt_current_player()

    # ── Moves ────────────────────────────────────────────────────────────

    def legal_targets(self, sq: Square) -> frozenset[Square]:
        """Legal destinations for the piece on *sq*."""
        return frozenset(self._state.legal_moves(sq))

    def click_square(self, sq: Square) -> MoveOutcome | None:
        """Handle a click on *sq*: select, re-select, move or deselect.

        Returns the outcome when a move was applied, ``None`` otherwise.
        """
        cp = self.current_player
        if cp is not None and not cp.is_human:
            return None
        if not sq.on_board:
            _LOGGER.debug("Ignored click outside the board: %r", sq)
            return None

        piece = self._state.board[sq]
        own_piece = piece is not None and piece.color == self._state.side_to_move

        if self._selection is not None:
            if sq in self._legal_targets:
                move = Move(self._selection, sq)
                return self._apply(move)
            if own_piece:
                self._select(sq)
                return None
            _LOGGER.debug("Ignored click on %s; selection cleared", sq)
            self._clear_selection()
            return None

        if own_piece:
            self._select(sq)
        return None

    def submit_move(self, move: Move) -> bool:
        """Apply *move* if it is legal for the side to move."""
        if not self._state.is_legal(move):
            _LOGGER.debug("Ignored illegal move %s", move)
            return False
        self._apply(move)
        return True

    def submit_strategy_move(self, color: Color, move: Move | None) -> bool:
        """Apply a move chosen by a strategy playing *color*.

        ``None`` means the strategy found no legal move; that is reported
        as a status message, without a state transition.
        """
        if color != self._state.side_to_move:
            _LOGGER.debug("Dropped strategy move for %s: not its turn", color)
            return False
        if move is None:
            self._set_status(NO_MOVES_STATUS)
            return False
        if move not in self._state.generate_legal_moves(color):
            _LOGGER.warning("Strategy returned non-legal move %s for %s", move, color)
            return False
        self._apply(move)
        return True

    def play_strategy_move(self, strategy: IStrategy, color: Color | None = None) -> bool:
        """Run *strategy* synchronously for *color* (default: side to move)."""
        side = self._state.side_to_move if color is None else color
        board = self._state.snapshot().board
        return self.submit_strategy_move(side, strategy.select_move(side, board))

    def undo_move(self) -> bool:
        """Undo the last move. Returns False when there is nothing to undo."""
        self._cancel_pending_computer_moves()
        try:
            record = self._state.undo_last_move()
        except NoHistoryError:
            self._set_status("No moves to undo")
            return False

        self._clear_selection()
        _LOGGER.info("Undid %s", record.move)
        self._set_status("Move undone")
        self._emit_phase(self._state.phase)
        self._prompt_current_player()
        return True

    # ── Internal helpers ─────────────────────────────────────────────────

    def _apply(self, move: Move) -> MoveOutcome:
        mover = self._state.side_to_move
        outcome = self._state.apply_move(move)
        record = self._state.move_history[-1]
        self._clear_selection()

        if record.was_promotion:
            self._set_status(f"{mover} pawn promoted to queen!")
        if outcome == MoveOutcome.CHECKMATE:
            self._set_status(f"Checkmate! {mover} wins!")
        elif outcome == MoveOutcome.CHECK:
            self._set_status(f"{mover.opposite} is in check!")
        else:
            self._set_status(f"{mover} moved {record.moved_piece.label}")
        _LOGGER.info("%s played %s (%s)", mover, move, outcome.name)

        self._emit_move(move, outcome)
        self._emit_phase(self._state.phase)

        if outcome == MoveOutcome.CHECKMATE:
            self._emit_game_over(mover)
            return outcome

        self._prompt_current_player()
        return outcome

    def _select(self, sq: Square) -> None:
        self._selection = sq
        self._legal_targets = self.legal_targets(sq)

    def _clear_selection(self) -> None:
        self._selection = None
        self._legal_targets = frozenset()

    def _prompt_current_player(self) -> None:
        """Ask the current player to move (no-op for humans)."""
        cp = self.current_player
        if cp is None or cp.is_human or self._state.is_game_over:
            return
        board: Board = self._state.snapshot().board
        cp.request_move(board)

    def _cancel_pending_computer_moves(self) -> None:
        for player in self._players.values():
            if not player.is_human:
                player.cancel()

    def _set_status(self, message: str) -> None:
        self._status = message
        for cb in self.events.on_status:
            cb(message)

    def _emit_move(self, move: Move, outcome: MoveOutcome) -> None:
        for cb in self.events.on_move:
            cb(move, outcome, self._state)

    def _emit_game_over(self, winner: Color) -> None:
        for cb in self.events.on_game_over:
            cb(winner)

    def _emit_phase(self, phase: GamePhase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)
