"""Data models for drupal-wrapped."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any, Union


@dataclass(frozen=True)
class UserProfile:
    """Public identity of a drupal.org user."""
    uid: str
    name: str
    url: Optional[str] = None
    avatar_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "name": self.name,
            "url": self.url,
            "avatarUrl": self.avatar_url,
        }


@dataclass(frozen=True)
class ContributionRecord:
    """One contribution on a topic. `created` is epoch seconds or a date string."""
    source_id: Optional[str]
    title: Optional[str]
    url: Optional[str]
    created: Union[int, float, str, None] = None


class FeedStatus(Enum):
    OK = "ok"
    EMPTY = "empty"
    DEGRADED = "degraded"


@dataclass
class FeedResult:
    """Records from one topic feed plus how the fetch went."""
    topic: str
    records: List[ContributionRecord] = field(default_factory=list)
    status: FeedStatus = FeedStatus.EMPTY
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.status is FeedStatus.DEGRADED


@dataclass(frozen=True)
class TopProjectAggregate:
    """Aggregate top-project figures, when the graph API reports them."""
    name: str
    count: int


@dataclass
class AggregationResult:
    """Profile plus every configured feed, each present even when empty."""
    profile: UserProfile
    feeds: Dict[str, List[ContributionRecord]]
    feed_status: Dict[str, FeedStatus]
    project_labels: Dict[str, str] = field(default_factory=dict)
    top_project: Optional[TopProjectAggregate] = None
    activity_by_month: Optional[List[int]] = None

    def count(self, topic: str) -> int:
        return len(self.feeds.get(topic, []))

    @property
    def degraded_topics(self) -> List[str]:
        return [topic for topic, status in self.feed_status.items() if status is FeedStatus.DEGRADED]


@dataclass
class EventLists:
    """Events from the enrichment service, by participation type."""
    spoken_at: List[str] = field(default_factory=list)
    organized: List[str] = field(default_factory=list)
    attended: List[str] = field(default_factory=list)


@dataclass
class EnrichmentRecord:
    """Record returned by the deep-scrape enrichment service."""
    total_issues_count: int = 0
    total_issues_for_ai_count: int = 0
    total_issues_for_drupal_count: int = 0
    mentee_count: int = 0
    member_since: Optional[str] = None
    account_created_year: Optional[int] = None
    contributor_roles: List[str] = field(default_factory=list)
    events: EventLists = field(default_factory=EventLists)


@dataclass
class ProjectStats:
    """Top project summary."""
    id: str
    name: str
    icon: str
    total_issues: int
    percentage: float
    top_metric: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "totalIssues": self.total_issues,
            "percentage": self.percentage,
            "topMetric": self.top_metric,
            "description": self.description,
        }


@dataclass
class MonthlyStat:
    month: str
    count: int


@dataclass
class ContributionItem:
    """A normalized contribution, ready for display."""
    id: str
    title: str
    project: str
    created_at: str  # YYYY-MM-DD
    url: str
    status: str = "closed"
    labels: List[str] = field(default_factory=list)
    comments: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "project": self.project,
            "createdAt": self.created_at,
            "status": self.status,
            "labels": list(self.labels),
            "comments": self.comments,
            "url": self.url,
        }


@dataclass
class UserEvent:
    id: str
    title: str
    date: str
    type: str  # "speaking", "volunteering" or "attending"
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "date": self.date, "type": self.type, "url": self.url}


@dataclass
class YearInReview:
    """Canonical year-in-review record handed to presentation layers."""

    # Identity
    user_id: str
    user_name: str
    avatar_url: Optional[str]

    # Totals
    total_contributions: int
    unique_issues_count: int
    total_issues: int
    topic_counts: Dict[str, int]
    ai_contribution_count: int
    drupal_core_contribution_count: int

    # Breakdown
    top_project: ProjectStats
    monthly_stats: List[MonthlyStat]
    issues: List[ContributionItem] = field(default_factory=list)
    ai_issues: List[ContributionItem] = field(default_factory=list)
    drupal_core_issues: List[ContributionItem] = field(default_factory=list)

    # Enrichment
    events: List[UserEvent] = field(default_factory=list)
    contributor_roles: List[str] = field(default_factory=list)
    mentee_count: int = 0
    member_since: Optional[int] = None
    membership_years: Optional[int] = None

    year: int = 2025
    is_demo: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "userName": self.user_name,
            "avatarUrl": self.avatar_url,
            "year": self.year,
            "totalContributions": self.total_contributions,
            "uniqueIssuesCount": self.unique_issues_count,
            "totalIssues": self.total_issues,
            "topicCounts": dict(self.topic_counts),
            "aiContributionCount": self.ai_contribution_count,
            "drupalCoreContributionCount": self.drupal_core_contribution_count,
            "topProject": self.top_project.to_dict(),
            "monthlyStats": [{"month": m.month, "count": m.count} for m in self.monthly_stats],
            "issues": [i.to_dict() for i in self.issues],
            "aiIssues": [i.to_dict() for i in self.ai_issues],
            "drupalCoreIssues": [i.to_dict() for i in self.drupal_core_issues],
            "events": [e.to_dict() for e in self.events],
            "contributorRoles": list(self.contributor_roles),
            "menteeCount": self.mentee_count,
            "memberSince": self.member_since,
            "membershipYears": self.membership_years,
            "isDemo": self.is_demo,
        }
