"""hearing-spine command-line interface."""

from hearing_spine.cli.app import app

__all__ = ["app"]
