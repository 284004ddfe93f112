"""Qt bridge to run strategy move selection in a worker thread."""

from __future__ import annotations

import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from rookery.core.board import Board
from rookery.core.enums import Color
from rookery.engine.random_strategy import RandomStrategy
from rookery.engine.strategy import IStrategy


class StrategyWorker(QObject):
    """Thread-affine worker that asks a strategy for a move on demand."""

    move_ready = pyqtSignal(int, object)
    search_cancelled = pyqtSignal(int)
    search_no_move = pyqtSignal(int)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_cancel_event", "_strategy")

    def __init__(self, strategy: IStrategy | None = None) -> None:
        super().__init__()
        self._strategy: IStrategy = strategy if strategy is not None else RandomStrategy()
        self._cancel_event = threading.Event()

    @pyqtSlot(object, int, int)
    def request_move(self, board_obj: object, color_value: int, request_id: int) -> None:
        """Select a move for *color_value* on *board_obj* and emit the result."""
        if not isinstance(board_obj, Board):
            self.search_error.emit(request_id, "Strategy received invalid board")
            return

        self._cancel_event.clear()
        try:
            move = self._strategy.select_move(Color(color_value), board_obj)
        except Exception as exc:
            self.search_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.search_cancelled.emit(request_id)
            return

        if move is None:
            self.search_no_move.emit(request_id)
            return

        self.move_ready.emit(request_id, move)

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current selection."""
        self._cancel_event.set()

    @pyqtSlot(object)
    def set_strategy(self, strategy: IStrategy) -> None:
        """Swap the strategy (takes effect on the next request)."""
        self._strategy = strategy
