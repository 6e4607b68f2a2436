"""Tests for the review service facade and its disk cache."""

from unittest.mock import Mock

import pytest

from conftest import FakeRouter, feed_records, user_document
from drupal_wrapped.core.exceptions import UserNotFound
from drupal_wrapped.core.models import EnrichmentRecord
from drupal_wrapped.services.aggregator import Aggregator
from drupal_wrapped.services.contribution_feed import ContributionFeedClient
from drupal_wrapped.services.resource_graph import ResourceGraphClient
from drupal_wrapped.services.review_service import ReviewCache, YearInReviewService
from drupal_wrapped.services.transport import CancelToken


def _aggregator(routes):
    router = FakeRouter(routes)
    return Aggregator(ResourceGraphClient(router), ContributionFeedClient(router)), router


DRIES_ROUTES = [
    ("/user/user", user_document()),
    ("machine_name=drupal", feed_records(5)),
    ("machine_name=ai", feed_records(2, prefix="a")),
]


class TestReviewCache:
    """Test cache keys and expiry settings."""

    def test_key_ignores_username_case(self):
        assert ReviewCache.key("Dries", 12, 2025) == ReviewCache.key("dries", 12, 2025)

    def test_key_depends_on_window_and_year(self):
        base = ReviewCache.key("dries", 12, 2025)
        assert ReviewCache.key("dries", 6, 2025) != base
        assert ReviewCache.key("dries", 12, 2024) != base

    def test_set_and_get(self, tmp_path):
        cache = ReviewCache(directory=str(tmp_path), ttl_hours=1)
        try:
            cache.set("k", {"totalContributions": 3})
            assert cache.get("k") == {"totalContributions": 3}
            assert cache.get("missing") is None
            assert cache.ttl_seconds == 3600
        finally:
            cache.close()


class TestYearInReviewService:
    """Test the build pipeline end to end over fake routes."""

    def test_build_serializes_review(self):
        aggregator, _ = _aggregator(DRIES_ROUTES)
        service = YearInReviewService(aggregator, year=2025)

        payload = service.build("dries", 12)

        assert payload["userName"] == "Dries Buytaert"
        assert payload["totalContributions"] == 7
        assert payload["drupalCoreContributionCount"] == 5
        assert payload["aiContributionCount"] == 2
        assert payload["isDemo"] is False

    def test_enrichment_is_merged(self):
        aggregator, _ = _aggregator(DRIES_ROUTES)
        enrichment = Mock()
        enrichment.fetch.return_value = EnrichmentRecord(mentee_count=4, contributor_roles=["Mentor"])
        service = YearInReviewService(aggregator, enrichment=enrichment, year=2025)

        payload = service.build("dries", 12)

        enrichment.fetch.assert_called_once_with("dries", 12, None)
        assert payload["menteeCount"] == 4
        assert payload["contributorRoles"] == ["Mentor"]
        assert payload["totalContributions"] == 7

    def test_cache_hit_skips_aggregation(self, tmp_path):
        aggregator, router = _aggregator(DRIES_ROUTES)
        cache = ReviewCache(directory=str(tmp_path))
        service = YearInReviewService(aggregator, cache=cache, year=2025)
        try:
            first = service.build("dries", 12)
            calls_after_first = len(router.calls)
            second = service.build("Dries", 12)
        finally:
            cache.close()

        assert second == first
        assert len(router.calls) == calls_after_first

    def test_unknown_user_is_not_cached(self, tmp_path):
        aggregator, _ = _aggregator([("/user/user", {"data": []})])
        cache = ReviewCache(directory=str(tmp_path))
        service = YearInReviewService(aggregator, cache=cache, year=2025)
        try:
            with pytest.raises(UserNotFound):
                service.build("doesnotexist123", 12)
            assert cache.get(ReviewCache.key("doesnotexist123", 12, 2025)) is None
        finally:
            cache.close()

    def test_degraded_review_is_not_cached(self, tmp_path):
        outage, outage_router = _aggregator([("/user/user", user_document())])
        cache = ReviewCache(directory=str(tmp_path))
        try:
            first = YearInReviewService(outage, cache=cache, year=2025).build("dries", 12)

            recovered, router = _aggregator(DRIES_ROUTES)
            second = YearInReviewService(recovered, cache=cache, year=2025).build("dries", 12)
        finally:
            cache.close()

        assert first["totalContributions"] == 0
        assert len(outage_router.urls_containing("machine_name=")) == 2
        assert second["totalContributions"] == 7
        assert len(router.urls_containing("machine_name=")) == 2

    def test_enrichment_receives_cancel_token(self):
        aggregator, _ = _aggregator(DRIES_ROUTES)
        enrichment = Mock()
        enrichment.fetch.return_value = None
        token = CancelToken()
        service = YearInReviewService(aggregator, enrichment=enrichment, year=2025)

        service.build_review("dries", 12, token)

        enrichment.fetch.assert_called_once_with("dries", 12, token)

    def test_preview_returns_profile_only(self):
        aggregator, router = _aggregator(DRIES_ROUTES)
        service = YearInReviewService(aggregator)

        profile = service.preview("dries")

        assert profile.name == "Dries Buytaert"
        assert len(router.calls) == 1

    def test_demo_is_flagged(self):
        payload = YearInReviewService.demo()

        assert payload["isDemo"] is True
        assert payload["userName"] == "Alex"
