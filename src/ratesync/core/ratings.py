"""Rating scale conversions.

Both libraries are compared on a shared 0-5 star scale where 0 means
"unrated". Apple Music stores 0-100 (20 per star), Plex stores ``userRating``
as 0-10 (2 per star, odd values are half stars).
"""

import math

MAX_STARS = 5

APPLE_MUSIC_STEP = 20
PLEX_STEP = 2


def _to_stars(value: float, step: int) -> int:
    # Half-up rounding, so a Plex 7 (3.5 stars) reads as 4
    stars = math.floor(value / step + 0.5)
    return max(0, min(MAX_STARS, stars))


def _check_stars(stars: int) -> None:
    if not 0 <= stars <= MAX_STARS:
        raise ValueError(f"Rating must be between 0 and {MAX_STARS}, got {stars}")


def from_apple_music(value: float) -> int:
    """Convert an Apple Music rating (0-100) to the shared scale."""
    return _to_stars(value, APPLE_MUSIC_STEP)


def to_apple_music(stars: int) -> int:
    """Convert a shared-scale rating to Apple Music's 0-100 scale."""
    _check_stars(stars)
    return stars * APPLE_MUSIC_STEP


def from_plex(value: float) -> int:
    """Convert a Plex ``userRating`` (0-10) to the shared scale."""
    return _to_stars(value, PLEX_STEP)


def to_plex(stars: int) -> int:
    """Convert a shared-scale rating to the 0-10 value Plex expects."""
    _check_stars(stars)
    return stars * PLEX_STEP
