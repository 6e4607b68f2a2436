"""High-level entry point: aggregate, enrich, normalize, optionally cache."""

import hashlib
import logging
from typing import Any, Dict, Optional, Tuple

from diskcache import Cache

from ..core.config import settings
from ..core.constants import CacheConstants
from ..core.demo import demo_year_in_review
from ..core.models import AggregationResult, UserProfile, YearInReview
from ..core.normalizer import normalize
from .aggregator import Aggregator
from .contribution_feed import ContributionFeedClient
from .enrichment_client import EnrichmentClient
from .proxy_router import ProxyRouter, load_relay_templates
from .resource_graph import ResourceGraphClient
from .transport import CancelToken, Transport

logger = logging.getLogger(__name__)


class ReviewCache:
    """Disk cache of serialized reviews, keyed by user, window and year."""

    def __init__(self, directory: Optional[str] = None, ttl_hours: Optional[int] = None):
        self.cache = Cache(directory or settings.cache_dir)
        self.ttl_seconds = 3600 * (ttl_hours if ttl_hours is not None else settings.cache_ttl_hours)

    @staticmethod
    def key(username: str, months: int, year: int) -> str:
        raw = f"{username.lower()}|{months}|{year}|{CacheConstants.CACHE_KEY_VERSION}"
        return hashlib.md5(raw.encode()).hexdigest()

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        hit = self.cache.get(key)
        if hit is not None:
            logger.debug(f"Cache hit for review: {key[:CacheConstants.CACHE_KEY_LENGTH]}...")
        return hit

    def set(self, key: str, payload: Dict[str, Any]):
        self.cache.set(key, payload, expire=self.ttl_seconds)

    def close(self):
        self.cache.close()


class YearInReviewService:
    """Builds YearInReview records; the cache sits outside the aggregation core."""

    def __init__(self, aggregator: Aggregator, enrichment: Optional[EnrichmentClient] = None,
                 cache: Optional[ReviewCache] = None, year: Optional[int] = None):
        self.aggregator = aggregator
        self.enrichment = enrichment
        self.cache = cache
        self.year = year or settings.review_year

    @classmethod
    def from_settings(cls, use_cache: bool = True) -> "YearInReviewService":
        """Wire the production pipeline from settings and the relay file."""
        transport = Transport()
        router = ProxyRouter(transport, load_relay_templates())
        aggregator = Aggregator(ResourceGraphClient(router), ContributionFeedClient(router))
        cache = ReviewCache() if use_cache else None
        return cls(aggregator, EnrichmentClient(transport), cache)

    def preview(self, username: str, cancel: Optional[CancelToken] = None) -> UserProfile:
        """Profile only, for showing name and avatar before the full review."""
        return self.aggregator.graph_client.fetch_user(username, cancel)

    def build(self, username: str, months: Optional[int] = None,
              cancel: Optional[CancelToken] = None) -> Dict[str, Any]:
        """Return the serialized YearInReview for a user."""
        months = months or settings.feed_window_months
        cache_key = ReviewCache.key(username, months, self.year)
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        review, result = self._assemble(username, months, cancel)
        payload = review.to_dict()
        if self.cache is not None:
            degraded = result.degraded_topics
            if degraded:
                logger.info(f"Not caching review for '{username}': degraded feeds {', '.join(degraded)}")
            else:
                self.cache.set(cache_key, payload)
        return payload

    def build_review(self, username: str, months: int,
                     cancel: Optional[CancelToken] = None) -> YearInReview:
        review, _ = self._assemble(username, months, cancel)
        return review

    def _assemble(self, username: str, months: int,
                  cancel: Optional[CancelToken] = None) -> Tuple[YearInReview, AggregationResult]:
        result = self.aggregator.collect(username, months, cancel)
        enrichment = self.enrichment.fetch(username, months, cancel) if self.enrichment is not None else None
        return normalize(result, enrichment, year=self.year), result

    @staticmethod
    def demo() -> Dict[str, Any]:
        return demo_year_in_review().to_dict()
