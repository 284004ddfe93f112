"""Computer opponent package: strategies and Qt worker bridge."""

from rookery.engine.qt_bridge import StrategyWorker
from rookery.engine.random_strategy import RandomStrategy
from rookery.engine.session import StrategySession
from rookery.engine.strategy import (
    IStrategy,
    available_strategies,
    create_strategy,
    register_strategy,
)

__all__ = [
    "IStrategy",
    "RandomStrategy",
    "StrategySession",
    "StrategyWorker",
    "available_strategies",
    "create_strategy",
    "register_strategy",
]
