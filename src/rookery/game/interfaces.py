"""Abstract interfaces and settings for the game layer.

The GameController depends on these definitions, not on concrete
player implementations or on the Qt strategy bridge.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from rookery.core.enums import Color

if TYPE_CHECKING:
    from rookery.core.board import Board


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a chess game."""

    WHITE_TO_MOVE = auto()
    BLACK_TO_MOVE = auto()
    CHECKMATE = auto()

    @classmethod
    def to_move(cls, color: Color) -> GamePhase:
        return cls.WHITE_TO_MOVE if color == Color.WHITE else cls.BLACK_TO_MOVE


class GameMode(IntEnum):
    """Who controls the two sides."""

    HUMAN = auto()  # both sides human
    COMPUTER = auto()  # one side played by a strategy


# ── Settings ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class GameSettings:
    """Immutable configuration for a new game.

    Args:
        mode: Human vs human or human vs computer.
        computer_color: Side played by the strategy in computer mode.
        computer_delay_ms: Pause before the computer move is dispatched.
        strategy: Registered strategy name.
        seed: Optional RNG seed for reproducible strategies.
    """

    mode: GameMode = GameMode.HUMAN
    computer_color: Color = Color.BLACK
    computer_delay_ms: int = 500
    strategy: str = "random"
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.computer_delay_ms < 0:
            raise ValueError(
                f"computer_delay_ms must be non-negative, got {self.computer_delay_ms}"
            )


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IPlayer(ABC):
    """Interface for a game participant (human or computer)."""

    @property
    @abstractmethod
    def color(self) -> Color: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def is_human(self) -> bool: ...

    @abstractmethod
    def request_move(self, board: Board) -> None:
        """Begin the move-selection process.

        For humans this is a no-op (they interact via clicks).
        For the computer this hands a private board copy to a strategy.
        """

    @abstractmethod
    def cancel(self) -> None:
        """Cancel a pending move computation (computer only, no-op for human)."""
