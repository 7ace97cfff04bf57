"""Apple Music integration."""

from .client import (
    AppleMusicClient,
    AppleMusicError,
    build_rating_script,
    escape_applescript_string,
    run_applescript,
)

__all__ = [
    "AppleMusicClient",
    "AppleMusicError",
    "build_rating_script",
    "escape_applescript_string",
    "run_applescript",
]
