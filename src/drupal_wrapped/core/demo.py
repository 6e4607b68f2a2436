"""Sample YearInReview for demos and UI development.

These numbers are made up. Nothing on the real-data path reads this module;
records built here are flagged with ``is_demo=True``.
"""

from .constants import ReviewConstants
from .models import ContributionItem, MonthlyStat, ProjectStats, UserEvent, YearInReview

DEMO_MONTHLY_COUNTS = [5, 12, 8, 15, 22, 18, 4, 10, 25, 14, 6, 3]

DEMO_ISSUE_TITLES = [
    "Fix race condition in auth provider",
    "Update dependency versions for security",
    "Refactor button component API",
    "Add dark mode support to dashboard",
    "Optimize image loading strategy",
    "Documentation: Add usage examples",
    "Bug: Navigation glitch on mobile",
    "Feature: User profile settings",
    "Accessibility: Improve screen reader labels",
    "Tests: Add E2E coverage for checkout",
    "Chore: Remove legacy CSS",
    "Design: New typography scale",
]

DEMO_AI_ISSUES = [
    ("ai-1", "Implement LLM caching for search", "2025-03-10", ["AI", "Performance"], 5),
    ("ai-2", "Fix prompt injection vulnerability", "2025-05-22", ["Security", "AI"], 12),
    ("ai-3", "Add support for Gemini 1.5 Pro", "2025-08-15", ["Feature", "AI"], 8),
]


def _demo_project(i: int) -> str:
    if i % 3 == 0:
        return "Nebula UI"
    return "Cosmos Backend" if i % 2 == 0 else "Docs"


def demo_year_in_review() -> YearInReview:
    issues = [
        ContributionItem(
            id=f"issue-{i}",
            title=title,
            project=_demo_project(i),
            created_at=f"2025-{(i % 12) + 1:02d}-15",
            url="#",
            status="open" if i % 4 == 0 else "closed",
            labels=["bug", "urgent"] if i % 2 == 0 else ["feature", "enhancement"],
            comments=(i * 7) % 10,
        )
        for i, title in enumerate(DEMO_ISSUE_TITLES)
    ]
    ai_issues = [
        ContributionItem(id=id_, title=title, project="Drupal AI", created_at=created, url="#",
                         labels=labels, comments=comments)
        for id_, title, created, labels, comments in DEMO_AI_ISSUES
    ]

    return YearInReview(
        user_id="user-123",
        user_name="Alex",
        avatar_url="https://www.drupal.org/files/styles/grid-3-2x/public/user-pictures/picture-default.jpg",
        total_contributions=142,
        unique_issues_count=45,
        total_issues=45,
        topic_counts={"drupal_core": 5, "ai": 12},
        ai_contribution_count=12,
        drupal_core_contribution_count=5,
        top_project=ProjectStats(
            id="proj-alpha",
            name="Nebula UI",
            icon="⚛️",
            total_issues=86,
            percentage=60.5,
            top_metric="Most Impactful",
            description="You drove 60% of all frontend cleanup tasks here.",
        ),
        monthly_stats=[
            MonthlyStat(month=m, count=c) for m, c in zip(ReviewConstants.MONTH_NAMES, DEMO_MONTHLY_COUNTS)
        ],
        issues=issues,
        ai_issues=ai_issues,
        events=[
            UserEvent(id="evt-1", title="DrupalCon Barcelona 2025", date="Sep 2025", type="speaking", url="#"),
            UserEvent(id="evt-2", title="Global Contribution Weekend", date="Jan 2025", type="volunteering", url="#"),
        ],
        mentee_count=46,
        member_since=2021,
        membership_years=4,
        year=ReviewConstants.DEFAULT_YEAR,
        is_demo=True,
    )
