"""Core modules for drupal-wrapped."""

from .models import *
from .config import settings

__all__ = [
    "settings",
    "UserProfile",
    "ContributionRecord",
    "FeedStatus",
    "FeedResult",
    "AggregationResult",
    "EnrichmentRecord",
    "YearInReview",
]
