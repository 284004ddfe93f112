"""Command line entry point: headless computer vs computer game."""

from __future__ import annotations

import argparse
import logging
import sys

from rookery.core.enums import Color
from rookery.engine.strategy import available_strategies, create_strategy
from rookery.game.controller import NO_MOVES_STATUS, GameController
from rookery.game.interfaces import GameSettings

_LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rookery",
        description="Play a computer vs computer game and print the final board.",
    )
    parser.add_argument(
        "--strategy", default="random", choices=available_strategies()
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=GameSettings().computer_delay_ms,
        help="pause before each computer move",
    )
    parser.add_argument("--max-plies", type=int, default=200)
    parser.add_argument("--fen", default=None, help="start from this placement")
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=120_000,
        help="stop the game after this long regardless of its state",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run a self-play game; returns the process exit code."""
    from PyQt6.QtCore import QCoreApplication, QTimer

    from rookery.engine.session import StrategySession

    args = build_parser().parse_args(argv)
    settings = GameSettings(
        computer_delay_ms=args.delay_ms,
        strategy=args.strategy,
        seed=args.seed,
    )
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    controller = GameController()
    session = StrategySession(
        controller=controller,
        strategy=create_strategy(settings.strategy, settings.seed),
        delay_ms=settings.computer_delay_ms,
    )

    def finish() -> None:
        session.cancel_ai_search()
        app.quit()

    def on_move(_move: object, _outcome: object, _state: object) -> None:
        if controller.state.ply_count >= args.max_plies:
            QTimer.singleShot(0, finish)

    def on_status(message: str) -> None:
        if message == NO_MOVES_STATUS or message.startswith("Computer error"):
            QTimer.singleShot(0, finish)

    controller.events.on_move.append(on_move)
    controller.events.on_status.append(on_status)
    controller.events.on_game_over.append(lambda _winner: QTimer.singleShot(0, finish))

    session.setup()
    try:
        controller.new_game(
            session.create_ai_player(Color.WHITE),
            session.create_ai_player(Color.BLACK),
            fen=args.fen,
        )
    except ValueError as exc:
        _LOGGER.error("Cannot start game: %s", exc)
        session.shutdown()
        return 2

    if controller.state.is_game_over:
        QTimer.singleShot(0, finish)
    QTimer.singleShot(args.timeout_ms, finish)
    app.exec()
    session.shutdown()

    snapshot = controller.current_state()
    print(snapshot.board)
    print(f"{snapshot.status} ({snapshot.ply_count} plies, {snapshot.fen})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
