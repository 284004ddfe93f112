"""Strategy protocol and registry for the computer opponent."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from rookery.engine.random_strategy import RandomStrategy

if TYPE_CHECKING:
    from rookery.core.board import Board
    from rookery.core.enums import Color
    from rookery.core.move import Move


class IStrategy(Protocol):
    """Protocol for move-selection strategies used by the game layer.

    *board* is a private copy; a strategy may simulate moves on it freely.
    Returns ``None`` when *color* has no legal move.
    """

    def select_move(self, color: Color, board: Board) -> Move | None: ...


StrategyFactory = Callable[[int | None], IStrategy]

_REGISTRY: dict[str, StrategyFactory] = {
    "random": RandomStrategy,
}


def register_strategy(name: str, factory: StrategyFactory) -> None:
    """Make *factory* available under *name* for :func:`create_strategy`."""
    if name in _REGISTRY:
        raise ValueError(f"Strategy already registered: {name!r}")
    _REGISTRY[name] = factory


def available_strategies() -> list[str]:
    return sorted(_REGISTRY)


def create_strategy(name: str = "random", seed: int | None = None) -> IStrategy:
    """Instantiate the strategy registered as *name*."""
    try:
        factory = _REGISTRY[name]
    except KeyError:
        raise ValueError(
            f"Unknown strategy {name!r} (available: {', '.join(available_strategies())})"
        ) from None
    return factory(seed)
