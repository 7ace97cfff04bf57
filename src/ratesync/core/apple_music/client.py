"""Apple Music rating lookup through AppleScript."""

import logging
import subprocess  # nosec B404
from typing import Callable, Optional

from ..ratings import from_apple_music

logger = logging.getLogger(__name__)

# Looks in the "Library" playlist; matching is by containment, not equality,
# so the first of several similarly named tracks wins.
RATING_SCRIPT = """\
tell application "Music"
    set search_results to (every file track of playlist "Library" \
whose name contains "{track_name}" and artist contains "{artist_name}")
    repeat with t in search_results
        return rating of t
    end repeat
end tell
"""


class AppleMusicError(Exception):
    """Custom exception for AppleScript bridge failures."""


def escape_applescript_string(value: str) -> str:
    """Escape a value for use inside a double-quoted AppleScript literal."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_rating_script(artist_name: str, track_name: str) -> str:
    """Fill the rating lookup script with escaped names."""
    return RATING_SCRIPT.format(
        artist_name=escape_applescript_string(artist_name),
        track_name=escape_applescript_string(track_name),
    )


def run_applescript(source: str) -> str:
    """Run an AppleScript program with osascript and return its output.

    Args:
        source: AppleScript source code, passed on stdin

    Returns:
        Stripped standard output of the script

    Raises:
        AppleMusicError: If osascript is missing or the script fails
    """
    try:
        result = subprocess.run(  # nosec B603 B607
            ["osascript", "-"],
            input=source,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise AppleMusicError("osascript not found; AppleScript needs macOS") from e
    except subprocess.CalledProcessError as e:
        raise AppleMusicError(f"osascript failed: {e.stderr.strip()}") from e

    return result.stdout.strip()


class AppleMusicClient:
    """Reads track ratings from the Music app."""

    def __init__(self, runner: Optional[Callable[[str], str]] = None) -> None:
        """Initialize Apple Music client.

        Args:
            runner: Callable that executes AppleScript source and returns its
                output; defaults to osascript
        """
        self.runner = runner or run_applescript

    def get_rating(self, artist_name: str, album_name: str, track_name: str) -> int:
        """Get a track's rating on the shared 0-5 scale.

        The album name is only used for logging; the lookup matches on track
        and artist names. Every failure is logged and reported as 0, so an
        unrated track and a failed lookup look the same to the caller.

        Args:
            artist_name: Artist name to match
            album_name: Album name, for context
            track_name: Track name to match

        Returns:
            Rating from 0 (unrated) to 5
        """
        script = build_rating_script(artist_name, track_name)
        try:
            output = self.runner(script).strip()
            if not output:
                raise AppleMusicError("No matching track")
            try:
                value = int(output)
            except ValueError as e:
                raise AppleMusicError(f"Unexpected rating value: {output!r}") from e
        except Exception as e:
            logger.error(
                "Failed to retrieve Apple Music rating for %s - %s - %s: %s",
                artist_name,
                album_name,
                track_name,
                e,
            )
            return 0

        return from_apple_music(value)
