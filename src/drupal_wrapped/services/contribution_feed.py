"""Per-topic contribution record feed client."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..core.config import settings
from ..core.constants import ApiConstants, FeedConstants
from ..core.exceptions import AggregateFetchError, TransportError
from ..core.models import ContributionRecord, FeedResult, FeedStatus
from ..core.schemas import decode_feed_records
from ..utils.urls import encode_uri_component
from .proxy_router import ProxyRouter
from .transport import CancelToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedTopic:
    """A named feed: `key` is the machine name sent to the endpoint."""
    name: str
    key: str
    project: str


def default_topics() -> List[FeedTopic]:
    return [
        FeedTopic(name, key, project)
        for name, (key, project) in FeedConstants.DEFAULT_TOPICS.items()
    ]


class ContributionFeedClient:
    """Fetches contribution records for one topic.

    A feed that cannot be fetched is reported as empty: a person with no
    activity on a topic and an unreachable feed look the same to callers.
    `fetch_feed_result` keeps the difference visible through FeedStatus.
    """

    def __init__(self, router: ProxyRouter, base_url: Optional[str] = None):
        self.router = router
        self.base_url = base_url or settings.contributions_url

    def feed_url(self, username: str, topic_key: str, window_months: int) -> str:
        return (
            f"{self.base_url}?username={encode_uri_component(username)}"
            f"&months={int(window_months)}&machine_name={encode_uri_component(topic_key)}"
        )

    def fetch_feed_result(self, username: str, topic_key: str, window_months: int,
                          cancel: Optional[CancelToken] = None) -> FeedResult:
        url = self.feed_url(username, topic_key, window_months)
        try:
            body = self.router.fetch_json(url, {"Accept": ApiConstants.JSON_ACCEPT}, cancel)
        except (AggregateFetchError, TransportError) as e:
            logger.warning(f"FeedDegraded: failed to fetch '{topic_key}' contributions for {username}: {e}")
            return FeedResult(topic=topic_key, status=FeedStatus.DEGRADED, error=str(e))

        records, skipped = decode_feed_records(body)
        if records is None:
            logger.warning(f"FeedDegraded: '{topic_key}' feed returned {type(body).__name__}, expected a list")
            return FeedResult(topic=topic_key, status=FeedStatus.DEGRADED, error="non-list body")
        if skipped:
            logger.warning(f"Skipped {skipped} malformed '{topic_key}' records for {username}")

        status = FeedStatus.OK if records else FeedStatus.EMPTY
        logger.info(f"{topic_key}: {len(records)} contributions for {username}")
        return FeedResult(topic=topic_key, records=records, status=status)

    def fetch_feed(self, username: str, topic_key: str, window_months: int,
                   cancel: Optional[CancelToken] = None) -> List[ContributionRecord]:
        return self.fetch_feed_result(username, topic_key, window_months, cancel).records

