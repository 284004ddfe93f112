"""Computer-opponent session: worker thread lifecycle and move hand-off."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PyQt6.QtCore import QObject, QThread, QTimer, pyqtSignal

from rookery.core.enums import Color
from rookery.core.move import Move
from rookery.engine.qt_bridge import StrategyWorker
from rookery.game.player import AIPlayer

if TYPE_CHECKING:
    from rookery.core.board import Board
    from rookery.engine.strategy import IStrategy
    from rookery.game.controller import GameController

_LOGGER = logging.getLogger(__name__)


class _StrategyCommandBus(QObject):
    """Signal bridge for issuing worker commands with queued delivery."""

    move_requested = pyqtSignal(object, int, int)
    cancel_requested = pyqtSignal()
    strategy_changed = pyqtSignal(object)


class StrategySession:
    """Owns the worker thread and hands computed moves to the controller.

    A request is dispatched after ``delay_ms``; its result is dropped when a
    newer request was queued or the game moved on (undo, reset, new game)
    in the meantime.
    """

    _WORKER_SHUTDOWN_TIMEOUT_MS = 2000

    __slots__ = (
        "__weakref__",
        "_controller",
        "_command_bus",
        "_dispatch_timer",
        "_worker_thread",
        "_worker",
        "_request_id",
        "_pending_request",
        "_pending_board",
        "_pending_color",
        "_pending_ply",
        "_delay_ms",
        "_is_shutting_down",
        "_is_started",
    )

    def __init__(
        self,
        *,
        controller: GameController,
        strategy: IStrategy | None = None,
        delay_ms: int = 500,
        parent: QObject | None = None,
    ) -> None:
        self._controller = controller
        self._delay_ms = delay_ms

        self._command_bus = _StrategyCommandBus(parent)
        self._dispatch_timer = QTimer(parent)
        self._dispatch_timer.setSingleShot(True)
        self._dispatch_timer.timeout.connect(self._emit_pending_request)

        self._worker_thread = QThread(parent)
        self._worker = StrategyWorker(strategy)
        self._request_id = 0
        self._pending_request: int | None = None
        self._pending_board: Board | None = None
        self._pending_color: Color | None = None
        self._pending_ply: int | None = None
        self._is_shutting_down = False
        self._is_started = False

    @property
    def is_started(self) -> bool:
        return self._is_started

    @property
    def has_pending_request(self) -> bool:
        return self._pending_request is not None

    def setup(self) -> None:
        """Start the worker in a dedicated thread and connect callbacks."""
        if self._is_started:
            return
        self._is_shutting_down = False
        self._worker.moveToThread(self._worker_thread)
        self._command_bus.move_requested.connect(self._worker.request_move)
        self._command_bus.cancel_requested.connect(self._worker.cancel)
        self._command_bus.strategy_changed.connect(self._worker.set_strategy)
        self._worker.move_ready.connect(self._on_move_ready)
        self._worker.search_cancelled.connect(self._on_cancelled)
        self._worker.search_no_move.connect(self._on_no_move)
        self._worker.search_error.connect(self._on_error)
        self._worker_thread.start()
        self._is_started = True
        _LOGGER.debug("Strategy worker thread started")

    def shutdown(self) -> None:
        """Cancel pending work and stop the worker thread."""
        if not self._is_started:
            return
        self._is_shutting_down = True
        self.cancel_ai_search()
        self._worker_thread.quit()
        self._worker_thread.wait(self._WORKER_SHUTDOWN_TIMEOUT_MS)
        self._is_started = False
        _LOGGER.debug("Strategy worker thread stopped")

    def set_strategy(self, strategy: IStrategy) -> None:
        """Use *strategy* for subsequent requests."""
        if self._is_started:
            self._command_bus.strategy_changed.emit(strategy)
            return
        self._worker.set_strategy(strategy)

    def create_ai_player(self, color: Color) -> AIPlayer:
        """Create a computer player wired to this session."""
        return AIPlayer(
            color,
            "Computer",
            on_request_move=self.request_ai_move,
            on_cancel=self.cancel_ai_search,
        )

    def request_ai_move(self, color: Color, board: Board) -> None:
        """Queue a move selection for *color* on a private *board* copy."""
        if not self._is_started or self._is_shutting_down:
            return
        self.cancel_ai_search()

        self._request_id += 1
        self._pending_request = self._request_id
        self._pending_board = board
        self._pending_color = color
        self._pending_ply = self._controller.state.ply_count
        self._dispatch_timer.start(self._delay_ms)

    def cancel_ai_search(self) -> None:
        """Cancel any pending or running request."""
        self._dispatch_timer.stop()
        self._clear_pending_request()
        if self._is_started:
            self._command_bus.cancel_requested.emit()

    # ── Worker callbacks ─────────────────────────────────────────────────

    def _emit_pending_request(self) -> None:
        if self._is_shutting_down:
            return
        request_id = self._pending_request
        board = self._pending_board
        color = self._pending_color
        if request_id is None or board is None or color is None:
            return
        self._command_bus.move_requested.emit(board, int(color), request_id)

    def _on_move_ready(self, request_id: int, move_obj: object) -> None:
        color = self._take_current(request_id)
        if color is None:
            return
        if not isinstance(move_obj, Move):
            _LOGGER.warning("Strategy produced %r instead of a move", move_obj)
            return
        self._controller.submit_strategy_move(color, move_obj)

    def _on_no_move(self, request_id: int) -> None:
        color = self._take_current(request_id)
        if color is None:
            return
        self._controller.submit_strategy_move(color, None)

    def _on_error(self, request_id: int, message: str) -> None:
        color = self._take_current(request_id)
        if color is None:
            return
        _LOGGER.error("Strategy failed for %s: %s", color, message)
        self._controller.set_status(f"Computer error: {message}")

    def _on_cancelled(self, request_id: int) -> None:
        if request_id == self._pending_request:
            self._clear_pending_request()

    # ── Internal ─────────────────────────────────────────────────────────

    def _take_current(self, request_id: int) -> Color | None:
        """Consume the pending request if *request_id* is still relevant."""
        if self._is_shutting_down or request_id != self._pending_request:
            _LOGGER.debug("Dropped stale strategy result %d", request_id)
            return None
        color = self._pending_color
        ply = self._pending_ply
        self._clear_pending_request()

        state = self._controller.state
        if ply != state.ply_count or color != state.side_to_move:
            _LOGGER.debug("Dropped strategy result %d: game moved on", request_id)
            return None
        return color

    def _clear_pending_request(self) -> None:
        self._pending_request = None
        self._pending_board = None
        self._pending_color = None
        self._pending_ply = None
