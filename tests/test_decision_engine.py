"""Tests for the rating decision engine."""

import itertools

import pytest

from ratesync.core.sync import (
    RatingAction,
    RatingDecision,
    SyncConsistencyError,
    decide_rating_action,
    needs_their_rating,
)

# (our_rating, their_rating, override_existing, expected action)
# Ratings cover "0", "positive and equal" and "positive and different".
DECISION_TABLE = [
    (0, 0, False, RatingAction.SKIP_UNRATED),
    (0, 3, False, RatingAction.SET),
    (0, 5, False, RatingAction.SET),
    (3, None, False, RatingAction.SKIP_EXISTING),
    (3, 0, False, RatingAction.SKIP_EXISTING),
    (3, 3, False, RatingAction.SKIP_EXISTING),
    (3, 5, False, RatingAction.SKIP_EXISTING),
    (0, 0, True, RatingAction.SKIP_UNRATED),
    (0, 3, True, RatingAction.SET),
    (0, 5, True, RatingAction.SET),
    (3, 0, True, RatingAction.SKIP_UNRATED),
    (3, 3, True, RatingAction.SKIP_SAME),
    (3, 5, True, RatingAction.OVERWRITE),
]


class TestDecisionTable:
    """Test each row of the decision table."""

    @pytest.mark.parametrize("our,their,override,expected", DECISION_TABLE)
    def test_decision(self, our, their, override, expected):
        """Test that exactly the expected action is chosen."""
        decision = decide_rating_action(our, their, override)

        assert isinstance(decision, RatingDecision)
        assert decision.action == expected
        assert decision.reason

    def test_set_carries_their_rating(self):
        """Test that a write decision carries the rating to write."""
        decision = decide_rating_action(0, 4, False)

        assert decision.action == RatingAction.SET
        assert decision.rating == 4

    def test_overwrite_carries_their_rating(self):
        """Test that an overwrite carries the new rating."""
        decision = decide_rating_action(3, 5, True)

        assert decision.action == RatingAction.OVERWRITE
        assert decision.rating == 5

    def test_skips_carry_no_rating(self):
        """Test that skip decisions never carry a rating."""
        assert decide_rating_action(3, 3, True).rating is None
        assert decide_rating_action(0, 0, False).rating is None
        assert decide_rating_action(2, None, False).rating is None

    def test_missing_their_rating(self):
        """Test that their rating is required once the first rule passes."""
        with pytest.raises(ValueError):
            decide_rating_action(0, None, False)

    def test_table_is_total(self):
        """Test that no combination falls through every rule."""
        for our, their, override in itertools.product(
            range(6), range(6), (True, False)
        ):
            try:
                decision = decide_rating_action(our, their, override)
            except SyncConsistencyError:  # pragma: no cover
                pytest.fail(f"No decision for {our}, {their}, {override}")
            assert decision.action in RatingAction

    def test_writes_only_when_needed(self):
        """Test that only SET and OVERWRITE write to Plex."""
        writing = {action for action in RatingAction if action.writes}
        assert writing == {RatingAction.SET, RatingAction.OVERWRITE}


class TestNeedsTheirRating:
    """Test when the Apple Music lookup can be skipped."""

    def test_lookup_skipped_for_rated_tracks(self):
        """Test that rated tracks are not looked up without overrides."""
        assert needs_their_rating(3, False) is False

    def test_lookup_needed(self):
        """Test that unrated tracks or overrides need a lookup."""
        assert needs_their_rating(0, False) is True
        assert needs_their_rating(3, True) is True
        assert needs_their_rating(0, True) is True
