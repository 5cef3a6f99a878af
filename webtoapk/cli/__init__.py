"""Command line interface for webtoapk."""

from webtoapk.cli.app import app, main


__all__ = ["app", "main"]
