"""Command-line interface package."""

from .main import cli

__all__ = ["cli"]
