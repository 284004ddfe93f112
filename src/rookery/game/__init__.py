"""Game management layer — controller, players, state machine.

Quick start::

    from rookery.core import Color, parse_square
    from rookery.game import GameController, HumanPlayer

    ctrl = GameController()
    ctrl.new_game(HumanPlayer(Color.WHITE, "Alice"), HumanPlayer(Color.BLACK, "Bob"))
    ctrl.click_square(parse_square("e2"))
    ctrl.click_square(parse_square("e4"))
"""

from rookery.game.controller import GameController, GameEvents
from rookery.game.interfaces import GameMode, GamePhase, GameSettings, IPlayer
from rookery.game.player import AIPlayer, HumanPlayer
from rookery.game.state import GameSnapshot, GameState, MoveRecord, NoHistoryError

__all__ = [
    # Interfaces / settings
    "GameMode",
    "GamePhase",
    "GameSettings",
    "IPlayer",
    # Concrete
    "AIPlayer",
    "GameController",
    "GameEvents",
    "GameSnapshot",
    "GameState",
    "HumanPlayer",
    "MoveRecord",
    # Errors
    "NoHistoryError",
]
