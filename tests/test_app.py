"""Tests for the command line entry point."""

from __future__ import annotations

import pytest

from rookery.app import build_parser, main


class TestParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.strategy == "random"
        assert args.seed is None
        assert args.delay_ms == 500
        assert args.max_plies == 200
        assert args.fen is None
        assert args.log_level == "INFO"

    def test_unknown_strategy_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--strategy", "minimax"])


class TestMain:
    def test_self_play_stops_at_ply_limit(
        self, qapp: object, capsys: pytest.CaptureFixture[str]
    ) -> None:
        del qapp
        code = main(
            ["--seed", "3", "--delay-ms", "0", "--max-plies", "6", "--log-level", "WARNING"]
        )
        out = capsys.readouterr().out
        assert code == 0
        assert "plies" in out
        assert "a b c d e f g h" in out

    def test_finished_position_returns_immediately(
        self, qapp: object, capsys: pytest.CaptureFixture[str]
    ) -> None:
        del qapp
        code = main(
            [
                "--delay-ms", "0",
                "--timeout-ms", "5000",
                "--log-level", "WARNING",
                "--fen", "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w",
            ]
        )
        out = capsys.readouterr().out
        assert code == 0
        assert "(0 plies" in out

    def test_invalid_fen_exit_code(self, qapp: object) -> None:
        del qapp
        assert main(["--fen", "not a fen", "--log-level", "WARNING"]) == 2
