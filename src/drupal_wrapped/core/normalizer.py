"""Maps aggregated drupal.org data to the canonical YearInReview record.

Everything here is pure: no I/O, no clock, no randomness. The same
AggregationResult (and enrichment) always yields the same YearInReview.
Empty feeds produce zero totals; sample numbers live in ``core.demo`` only.
"""

import email.utils
import re
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Union

from .constants import FeedConstants, ReviewConstants
from .models import (
    AggregationResult,
    ContributionItem,
    ContributionRecord,
    EnrichmentRecord,
    EventLists,
    MonthlyStat,
    ProjectStats,
    TopProjectAggregate,
    UserEvent,
    YearInReview,
)
from ..utils.urls import upgrade_scheme

_NUMERIC_RE = re.compile(r"^-?\d+(\.\d+)?$")
_YEAR_RE = re.compile(r"\b(20\d{2})\b")
_RELATIVE_YEARS_RE = re.compile(r"(\d+)\s+year", re.IGNORECASE)


def default_date(year: int) -> str:
    return f"{year:04d}-01-01"


def _parse_moment(value: Union[int, float, str]) -> datetime:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)

    text = value.strip()
    if _NUMERIC_RE.match(text):
        return datetime.fromtimestamp(float(text), tz=timezone.utc)
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        # RFC 2822 dates, e.g. "Mon, 10 Mar 2025 12:00:00 GMT"
        parsed = email.utils.parsedate_to_datetime(text)
        if parsed is None:
            raise ValueError(f"unrecognized date: {text}")
        return parsed


def normalize_created(value: Union[int, float, str, None], default: str) -> str:
    """Canonical YYYY-MM-DD (UTC) for epoch seconds or a date string."""
    if not value or isinstance(value, bool):
        return default
    try:
        moment = _parse_moment(value)
    except (TypeError, ValueError, OverflowError, OSError):
        return default
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date().isoformat()


def _project_slug(project: str) -> str:
    return re.sub(r"\s+", "-", project.strip().lower())


def transform_records(records: Sequence[ContributionRecord], project: str, year: int) -> List[ContributionItem]:
    fallback_date = default_date(year)
    items = []
    for index, record in enumerate(records):
        items.append(ContributionItem(
            id=record.source_id or f"{_project_slug(project)}-{index}",
            title=record.title or ReviewConstants.UNTITLED,
            project=project,
            created_at=normalize_created(record.created, fallback_date),
            url=record.url or ReviewConstants.MISSING_URL,
            labels=[project, "Contribution"],
        ))
    return items


def build_top_project(aggregate: Optional[TopProjectAggregate], total: int, year: int) -> ProjectStats:
    """Top project summary, or a 'No Activity' placeholder. Never None."""
    if aggregate is None:
        return ProjectStats(
            id="none",
            name="No Activity",
            icon=ReviewConstants.NO_ACTIVITY_ICON,
            total_issues=0,
            percentage=0.0,
            top_metric="Quiet Year",
            description=f"No specific project activity found for {year}.",
        )

    count = max(0, int(aggregate.count))
    percentage = round(count / total * 100, 1) if total > 0 else 0.0
    return ProjectStats(
        id="top-project",
        name=aggregate.name,
        icon=ReviewConstants.TOP_PROJECT_ICON,
        total_issues=count,
        percentage=min(100.0, max(0.0, percentage)),
        top_metric="Most Active",
        description=f"You focused heavily on {aggregate.name}.",
    )


def build_monthly_stats(activity_by_month: Optional[Sequence[int]]) -> List[MonthlyStat]:
    # Feeds carry no reliable per-month data; zeros unless a source supplies all 12 months
    if activity_by_month is not None and len(activity_by_month) == 12:
        counts = [max(0, int(c)) for c in activity_by_month]
    else:
        counts = [0] * 12
    return [MonthlyStat(month=name, count=count) for name, count in zip(ReviewConstants.MONTH_NAMES, counts)]


def parse_member_since(text: Optional[str], year: int) -> Optional[int]:
    """Join year from "2015" or "Member for 10 years 2 months"."""
    if not text:
        return None
    match = _YEAR_RE.search(text)
    if match:
        return int(match.group(1))
    match = _RELATIVE_YEARS_RE.search(text)
    if match:
        return year - int(match.group(1))
    return None


def map_events(events: EventLists, year: int) -> List[UserEvent]:
    result = []
    for titles, event_type in (
        (events.spoken_at, "speaking"),
        (events.organized, "volunteering"),
        (events.attended, "attending"),
    ):
        for index, title in enumerate(titles or []):
            cleaned = re.sub(r"['\"]", "", title or "").strip()
            if not cleaned:
                continue
            result.append(UserEvent(
                id=f"{event_type}-{index}",
                title=cleaned,
                date=str(year),
                type=event_type,
                url=ReviewConstants.MISSING_URL,
            ))
    return result


def normalize(result: AggregationResult, enrichment: Optional[EnrichmentRecord] = None,
              year: int = ReviewConstants.DEFAULT_YEAR) -> YearInReview:
    """Build the YearInReview for one aggregation."""
    topic_counts = {topic: len(records) for topic, records in result.feeds.items()}
    total = sum(topic_counts.values())

    items_by_topic = {
        topic: transform_records(records, result.project_labels.get(topic, topic), year)
        for topic, records in result.feeds.items()
    }
    all_items = [item for items in items_by_topic.values() for item in items]

    member_since = None
    membership_years = None
    events: List[UserEvent] = []
    roles: List[str] = []
    mentee_count = 0
    if enrichment is not None:
        member_since = enrichment.account_created_year or parse_member_since(enrichment.member_since, year)
        if member_since is not None:
            membership_years = max(0, year - member_since)
        events = map_events(enrichment.events, year)
        roles = list(enrichment.contributor_roles)
        mentee_count = max(0, enrichment.mentee_count)

    return YearInReview(
        user_id=result.profile.uid,
        user_name=result.profile.name,
        avatar_url=upgrade_scheme(result.profile.avatar_url),
        total_contributions=total,
        unique_issues_count=total,
        total_issues=total,
        topic_counts=topic_counts,
        ai_contribution_count=topic_counts.get(FeedConstants.AI, 0),
        drupal_core_contribution_count=topic_counts.get(FeedConstants.DRUPAL_CORE, 0),
        top_project=build_top_project(result.top_project, total, year),
        monthly_stats=build_monthly_stats(result.activity_by_month),
        issues=all_items,
        ai_issues=items_by_topic.get(FeedConstants.AI, []),
        drupal_core_issues=items_by_topic.get(FeedConstants.DRUPAL_CORE, []),
        events=events,
        contributor_roles=roles,
        mentee_count=mentee_count,
        member_since=member_since,
        membership_years=membership_years,
        year=year,
    )
