"""Apple Music to Plex rating sync.

Copies per-track star ratings from the macOS Music app into a Plex Media
Server music library.
"""

__version__ = "1.0.0"

from .config import Config, SyncOptions
from .core.apple_music import AppleMusicClient
from .core.plex import PlexClient
from .core.sync import RatingSyncOrchestrator, SyncStatistics

__all__ = [
    "AppleMusicClient",
    "Config",
    "PlexClient",
    "RatingSyncOrchestrator",
    "SyncOptions",
    "SyncStatistics",
]
