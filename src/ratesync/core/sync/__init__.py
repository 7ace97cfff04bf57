"""Synchronization module.

Handles rating decisions and orchestration of a sync run.
"""

from .decision_engine import (
    RatingAction,
    RatingDecision,
    SyncConsistencyError,
    decide_rating_action,
    needs_their_rating,
)
from .orchestrator import RatingSyncOrchestrator, SyncStatistics

__all__ = [
    # Decision engine
    "RatingAction",
    "RatingDecision",
    "SyncConsistencyError",
    "decide_rating_action",
    "needs_their_rating",
    # Orchestration
    "RatingSyncOrchestrator",
    "SyncStatistics",
]
