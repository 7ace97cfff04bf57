"""Display helpers for CLI."""

from .formatters import display_sync_summary

__all__ = ["display_sync_summary"]
