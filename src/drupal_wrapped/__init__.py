"""drupal-wrapped - Drupal.org year in review aggregation."""

__version__ = "1.0.0"
__author__ = "drupal-wrapped Team"

from .core.models import *
from .core.config import settings
from .core.exceptions import AggregateFetchError, UserNotFound
from .core.normalizer import normalize
from .services.aggregator import Aggregator
from .services.review_service import YearInReviewService

__all__ = [
    "settings",
    "normalize",
    "Aggregator",
    "YearInReviewService",
    "AggregateFetchError",
    "UserNotFound",
]
