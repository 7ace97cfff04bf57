"""Rating sync orchestrator.

Walks every album of a Plex library section, then every track of each
album, looks up the Apple Music rating and writes it to Plex when the
decision engine says so. Albums and tracks are handled one at a time.

Listing and write failures abort the whole run. Apple Music lookup failures
do not; they read as "unrated".
"""

import logging
import time
from collections import Counter
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import Any, Callable, Dict, Optional

from ...config import SyncOptions
from ...models import AlbumEntry, ByKey, TrackEntry
from ...utils.logging_config import TRACE
from ..apple_music import AppleMusicClient
from ..plex import PlexClient
from ..ratings import to_plex
from .decision_engine import (
    RatingAction,
    RatingDecision,
    SyncConsistencyError,
    decide_rating_action,
    needs_their_rating,
)

logger = logging.getLogger(__name__)


@dataclass
class SyncStatistics:
    """Counters collected during one sync run."""

    albums_processed: int = 0
    albums_skipped: int = 0
    tracks_processed: int = 0
    ratings_written: int = 0
    actions: Counter = dataclass_field(default_factory=Counter)
    duration_seconds: float = 0.0

    def add_decision(self, decision: RatingDecision) -> None:
        """Record the decision taken for one track."""
        self.tracks_processed += 1
        self.actions[decision.action] += 1

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics."""
        return {
            "albums_processed": self.albums_processed,
            "albums_skipped": self.albums_skipped,
            "tracks_processed": self.tracks_processed,
            "ratings_set": self.actions[RatingAction.SET],
            "ratings_overwritten": self.actions[RatingAction.OVERWRITE],
            "skipped_existing": self.actions[RatingAction.SKIP_EXISTING],
            "skipped_unrated": self.actions[RatingAction.SKIP_UNRATED],
            "skipped_same": self.actions[RatingAction.SKIP_SAME],
            "ratings_written": self.ratings_written,
            "duration_seconds": round(self.duration_seconds, 3),
        }


class RatingSyncOrchestrator:
    """Copies track ratings from Apple Music to a Plex library section."""

    def __init__(
        self,
        options: SyncOptions,
        plex_client: PlexClient,
        apple_music_client: AppleMusicClient,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            options: Resolved sync settings
            plex_client: Client used for listings and rating writes
            apple_music_client: Source of candidate ratings
            sleep: Used for the pauses before a dry run or overwrite
            clock: Monotonic clock used for the duration summary
        """
        self.options = options
        self.plex_client = plex_client
        self.apple_music_client = apple_music_client
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_options(cls, options: SyncOptions) -> "RatingSyncOrchestrator":
        """Build an orchestrator with real Plex and Apple Music clients."""
        apple_music_client = AppleMusicClient()
        logger.log(TRACE, "Initialized Apple Music client")
        plex_client = PlexClient(
            base_url=options.plex_base_url, auth_token=options.plex_auth_token
        )
        logger.log(TRACE, "Initialized Plex API client")
        return cls(options, plex_client, apple_music_client)

    def run(self) -> SyncStatistics:
        """Run one full sync pass over the configured section.

        Returns:
            Statistics for the run

        Raises:
            Exception: Any listing or write failure, after logging it
        """
        self._warn_about_modes()

        stats = SyncStatistics()
        start = self._clock()

        try:
            logger.debug("Loading albums list...")
            albums = self.plex_client.list_albums(ByKey(key=self.options.section_key))
            for album in albums:
                self._sync_album(album, stats)
        except Exception:
            logger.critical("Rating sync aborted", exc_info=True)
            raise

        stats.duration_seconds = self._clock() - start
        logger.info(
            "Finished in %d sec: %d albums, %d tracks, %d ratings written",
            round(stats.duration_seconds),
            stats.albums_processed,
            stats.tracks_processed,
            stats.ratings_written,
            extra={"duration_ms": round(stats.duration_seconds * 1000)},
        )
        return stats

    def _warn_about_modes(self) -> None:
        if self.options.dry_run:
            logger.warning("Performing dry run, no changes will be made")
            self._sleep(self.options.dry_run_delay)

        if self.options.override_existing:
            logger.warning("Existing ratings will be overwritten")
            logger.warning(
                "Waiting for %g seconds to allow user to cancel",
                self.options.override_delay,
            )
            self._sleep(self.options.override_delay)

    def _sync_album(self, album: AlbumEntry, stats: SyncStatistics) -> None:
        if album.name == "":
            logger.warning(
                "Missing album title, skipping album %s",
                album.key,
                extra={"album_key": album.key},
            )
            stats.albums_skipped += 1
            return

        logger.debug(
            "Loading tracks list for %s - %s...", album.artist_name, album.name
        )
        tracks = self.plex_client.list_album_tracks(ByKey(key=album.key))
        stats.albums_processed += 1

        for track in tracks:
            self._sync_track(album, track, stats)

    def _sync_track(
        self, album: AlbumEntry, track: TrackEntry, stats: SyncStatistics
    ) -> None:
        context: Dict[str, Any] = {
            "artist": album.artist_name,
            "album": track.album_name,
            "track": track.name,
        }
        label = f"{album.artist_name} - {track.album_name} - {track.name}"
        our_rating = track.rating

        their_rating: Optional[int] = None
        if needs_their_rating(our_rating, self.options.override_existing):
            logger.debug("Getting Apple Music rating for %s...", label)
            their_rating = self.apple_music_client.get_rating(
                artist_name=album.artist_name,
                album_name=track.album_name,
                track_name=track.name,
            )

        decision = decide_rating_action(
            our_rating, their_rating, self.options.override_existing
        )
        stats.add_decision(decision)

        context.update(
            our_rating=our_rating,
            their_rating=their_rating,
            action=decision.action.value,
        )
        ratings = f"(ours={our_rating}, theirs={their_rating})"

        if not decision.action.writes:
            logger.info(
                "Skipping %s: %s %s", label, decision.reason, ratings, extra=context
            )
            return

        overwrite = decision.action == RatingAction.OVERWRITE
        level = logging.WARNING if overwrite else logging.INFO

        if self.options.dry_run:
            logger.log(
                level,
                "[DRY-RUN] Would %s rating for %s %s",
                "overwrite" if overwrite else "set",
                label,
                ratings,
                extra=context,
            )
            return

        logger.log(
            level,
            "%s rating for %s %s",
            "Overwriting" if overwrite else "Setting",
            label,
            ratings,
            extra=context,
        )
        if decision.rating is None:
            raise SyncConsistencyError(f"No rating to write for {label}")
        self.plex_client.set_track_rating(
            ByKey(key=track.key), to_plex(decision.rating)
        )
        stats.ratings_written += 1
