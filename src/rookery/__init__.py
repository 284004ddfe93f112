"""Rookery — a chess rules engine with a pluggable computer opponent."""

__version__ = "0.1.0"
