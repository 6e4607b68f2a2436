"""Profile gate plus concurrent contribution feed fan-out."""

import logging
import time
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Dict, Optional, Sequence

from ..core.config import settings
from ..core.constants import FeedConstants
from ..core.exceptions import OperationCancelled
from ..core.models import AggregationResult, FeedResult, FeedStatus
from .contribution_feed import ContributionFeedClient, FeedTopic, default_topics
from .resource_graph import ResourceGraphClient
from .transport import CancelToken, check_cancelled

logger = logging.getLogger(__name__)


class Aggregator:
    """Collects one user's profile and all configured topic feeds."""

    def __init__(self, graph_client: ResourceGraphClient, feed_client: ContributionFeedClient,
                 topics: Optional[Sequence[FeedTopic]] = None, max_workers: Optional[int] = None):
        self.graph_client = graph_client
        self.feed_client = feed_client
        self.topics = tuple(topics if topics is not None else default_topics())
        self.max_workers = max_workers or settings.max_workers

    def collect(self, username: str, window_months: Optional[int] = None,
                cancel: Optional[CancelToken] = None) -> AggregationResult:
        """Fetch the profile, then every feed in parallel.

        Profile failures (UserNotFound, AggregateFetchError) propagate and no
        feed is requested. A failing feed becomes an empty list.
        """
        months = window_months or settings.feed_window_months
        logger.info(f"🚀 Collecting {months}-month contributions for '{username}'")
        start_time = time.time()

        check_cancelled(cancel)
        profile = self.graph_client.fetch_user(username, cancel)

        results = self.fetch_feeds(username, months, cancel)

        feeds = {topic.name: results[topic.name].records for topic in self.topics}
        feed_status = {topic.name: results[topic.name].status for topic in self.topics}
        degraded = [name for name, status in feed_status.items() if status is FeedStatus.DEGRADED]
        if degraded:
            logger.warning(f"Degraded feeds for '{username}': {', '.join(degraded)}")

        elapsed_time = time.time() - start_time
        logger.info(f"✅ Collection for '{username}' completed in {elapsed_time:.1f}s")

        return AggregationResult(
            profile=profile,
            feeds=feeds,
            feed_status=feed_status,
            project_labels={topic.name: topic.project for topic in self.topics},
        )

    def fetch_feeds(self, username: str, months: int,
                    cancel: Optional[CancelToken] = None) -> Dict[str, FeedResult]:
        """Fetch all topics concurrently; every topic gets a result."""
        results: Dict[str, FeedResult] = {}
        if not self.topics:
            return results

        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(self.topics)))
        cancelled = False
        try:
            future_to_topic = {
                executor.submit(self.feed_client.fetch_feed_result, username, topic.key, months, cancel): topic
                for topic in self.topics
            }

            pending = set(future_to_topic)
            poll = FeedConstants.JOIN_POLL_INTERVAL if cancel is not None else None
            while pending:
                done, pending = wait(pending, timeout=poll, return_when=FIRST_COMPLETED)
                for future in done:
                    topic = future_to_topic[future]
                    results[topic.name] = self._feed_outcome(topic, future)

                if pending and cancel is not None and cancel.cancelled:
                    cancelled = True
                    raise OperationCancelled(f"Feed collection for '{username}' was cancelled")
        finally:
            executor.shutdown(wait=not cancelled, cancel_futures=True)

        return results

    def _feed_outcome(self, topic: FeedTopic, future) -> FeedResult:
        try:
            return future.result()
        except OperationCancelled:
            return FeedResult(topic=topic.key, status=FeedStatus.DEGRADED, error="cancelled")
        except Exception as e:
            logger.error(f"❌ {topic.name}: failed with error: {e}")
            return FeedResult(topic=topic.key, status=FeedStatus.DEGRADED, error=str(e))

