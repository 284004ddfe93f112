"""Human and computer seats at the board."""

from __future__ import annotations

from collections.abc import Callable

from rookery.core.board import Board
from rookery.core.enums import Color
from rookery.game.interfaces import IPlayer

MoveRequest = Callable[[Color, Board], None]


class _Seat(IPlayer):
    """Color and display name shared by both player kinds."""

    __slots__ = ("_color", "_name")

    def __init__(self, color: Color, name: str) -> None:
        self._color = color
        self._name = name

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._color}, {self._name!r})"


class HumanPlayer(_Seat):
    """Moves arrive through ``GameController.click_square``; nothing to request."""

    __slots__ = ()

    def __init__(self, color: Color, name: str = "") -> None:
        super().__init__(color, name or f"{str(color).capitalize()} player")

    @property
    def is_human(self) -> bool:
        return True

    def request_move(self, board: Board) -> None:
        pass

    def cancel(self) -> None:
        pass


class AIPlayer(_Seat):
    """Computer seat; ``request_move`` hands ``(color, board)`` to *on_request_move*.

    The callback may answer synchronously (``GameController.submit_strategy_move``)
    or queue the work on a ``StrategySession``.
    """

    __slots__ = ("_on_request_move", "_on_cancel")

    def __init__(
        self,
        color: Color,
        name: str = "Computer",
        on_request_move: MoveRequest | None = None,
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(color, name)
        self._on_request_move = on_request_move
        self._on_cancel = on_cancel

    @property
    def is_human(self) -> bool:
        return False

    def request_move(self, board: Board) -> None:
        if self._on_request_move is not None:
            self._on_request_move(self._color, board)

    def cancel(self) -> None:
        if self._on_cancel is not None:
            self._on_cancel()
