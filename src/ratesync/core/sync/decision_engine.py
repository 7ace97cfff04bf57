"""Decision logic for propagating a rating from Apple Music to Plex.

Rules are checked in order and the first match wins:

1. Overrides disabled and Plex already has a rating: skip.
2. Apple Music rating is 0 (unrated): skip.
3. Both ratings are equal: skip.
4. Plex rating is 0: set the Apple Music rating.
5. Overrides enabled: overwrite with the Apple Music rating.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SyncConsistencyError(Exception):
    """Raised when no decision rule matches; indicates a bug."""


class RatingAction(str, Enum):
    """Outcome of the decision for one track."""

    SKIP_EXISTING = "skip_existing"  # Plex rating kept, overrides disabled
    SKIP_UNRATED = "skip_unrated"  # Nothing to propagate
    SKIP_SAME = "skip_same"  # Already in sync
    SET = "set"  # Fill an empty Plex rating
    OVERWRITE = "overwrite"  # Replace a differing Plex rating

    @property
    def writes(self) -> bool:
        """Whether this action writes to Plex."""
        return self in (RatingAction.SET, RatingAction.OVERWRITE)


@dataclass(frozen=True)
class RatingDecision:
    """Result of a rating decision."""

    action: RatingAction
    reason: str
    # Shared-scale rating to write, only set for writing actions
    rating: Optional[int] = None


def needs_their_rating(our_rating: int, override_existing: bool) -> bool:
    """Whether the Apple Music rating has to be looked up at all."""
    return override_existing or our_rating == 0


def decide_rating_action(
    our_rating: int, their_rating: Optional[int], override_existing: bool
) -> RatingDecision:
    """Decide what to do with one track.

    Args:
        our_rating: Current Plex rating on the shared scale
        their_rating: Apple Music rating on the shared scale, or None when it
            was not looked up because the first rule already applies
        override_existing: Whether differing Plex ratings may be replaced

    Returns:
        The decision for this track

    Raises:
        ValueError: If their_rating is needed but missing
        SyncConsistencyError: If no rule matches
    """
    if not override_existing and our_rating > 0:
        return RatingDecision(
            RatingAction.SKIP_EXISTING, "already rated, overrides disabled"
        )

    if their_rating is None:
        raise ValueError("Apple Music rating is required to decide this track")

    if their_rating == 0:
        return RatingDecision(RatingAction.SKIP_UNRATED, "unrated in Apple Music")

    if their_rating == our_rating:
        return RatingDecision(RatingAction.SKIP_SAME, "ratings already match")

    if our_rating == 0:
        return RatingDecision(
            RatingAction.SET, "no rating in Plex", rating=their_rating
        )

    if override_existing:
        return RatingDecision(
            RatingAction.OVERWRITE, "overwriting differing rating", rating=their_rating
        )

    raise SyncConsistencyError(
        f"No decision for ourRating={our_rating}, theirRating={their_rating}, "
        f"overrideExisting={override_existing}"
    )
