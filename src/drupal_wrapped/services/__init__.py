"""Services for drupal-wrapped."""

from .transport import Transport, CancelToken
from .proxy_router import ProxyRouter, RelayTemplate
from .resource_graph import ResourceGraphClient
from .contribution_feed import ContributionFeedClient, FeedTopic
from .aggregator import Aggregator

__all__ = [
    "Transport",
    "CancelToken",
    "ProxyRouter",
    "RelayTemplate",
    "ResourceGraphClient",
    "ContributionFeedClient",
    "FeedTopic",
    "Aggregator",
]
