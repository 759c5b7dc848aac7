"""Statistics and derived queries over a snapshot of applications.

Every function here is a pure function of the applications passed in and,
where time matters, of an explicit ``now``. ``ApplicationAnalytics`` binds
them to a repository's current snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from applywise.tracker.models import (
    ApplicationStatus,
    JobApplication,
    Priority,
    as_utc,
    utc_now,
)
from applywise.tracker.repository import ApplicationRepository

if TYPE_CHECKING:
    from applywise.config.settings import Settings

DEFAULT_FOLLOW_UP_WINDOW_DAYS = 3
DEFAULT_RECENT_WINDOW_DAYS = 7

PENDING_STATUSES = frozenset({ApplicationStatus.APPLIED, ApplicationStatus.SCREENING})
HIGH_PRIORITIES = frozenset({Priority.HIGH, Priority.URGENT})

# Sort key for applications without a follow-up date
FAR_FUTURE = datetime.max.replace(tzinfo=UTC)


@dataclass(frozen=True)
class ApplicationStats:
    """Aggregate counts over a collection of applications."""

    total: int
    interviews: int
    offers: int
    rejections: int
    pending: int

    @property
    def active(self) -> int:
        return self.pending + self.interviews

    @property
    def success_rate(self) -> float:
        """Offers as a percentage of all applications (0 when empty)."""
        if self.total == 0:
            return 0.0
        return self.offers / self.total * 100

    @property
    def interview_rate(self) -> float:
        """Interviews as a percentage of all applications (0 when empty)."""
        if self.total == 0:
            return 0.0
        return self.interviews / self.total * 100

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "interviews": self.interviews,
            "offers": self.offers,
            "rejections": self.rejections,
            "pending": self.pending,
            "active": self.active,
            "success_rate": self.success_rate,
            "interview_rate": self.interview_rate,
        }


class TimeRange(str, Enum):
    """Look-back windows for the application timeline."""

    WEEK = "Week"
    MONTH = "Month"
    QUARTER = "Quarter"
    YEAR = "Year"

    @property
    def days(self) -> int:
        return _TIME_RANGE_DAYS[self]


_TIME_RANGE_DAYS = {
    TimeRange.WEEK: 7,
    TimeRange.MONTH: 30,
    TimeRange.QUARTER: 90,
    TimeRange.YEAR: 365,
}


@dataclass(frozen=True)
class TimelinePoint:
    date: datetime
    applications: int


@dataclass(frozen=True)
class Timeline:
    """Per-day application counts over a time range."""

    time_range: TimeRange
    points: list[TimelinePoint]

    @property
    def total(self) -> int:
        return sum(point.applications for point in self.points)

    @property
    def average_per_day(self) -> float:
        days = self.time_range.days
        return self.total / days if days > 0 else 0.0


def _resolve_now(now: datetime | None) -> datetime:
    return as_utc(now) if now is not None else utc_now()


def compute_stats(applications: Iterable[JobApplication]) -> ApplicationStats:
    """Count applications by outcome."""
    statuses = [application.status for application in applications]
    return ApplicationStats(
        total=len(statuses),
        interviews=statuses.count(ApplicationStatus.INTERVIEWING),
        offers=statuses.count(ApplicationStatus.OFFER),
        rejections=statuses.count(ApplicationStatus.REJECTED),
        pending=sum(1 for status in statuses if status in PENDING_STATUSES),
    )


def high_priority(applications: Iterable[JobApplication]) -> list[JobApplication]:
    return [a for a in applications if a.priority in HIGH_PRIORITIES]


def follow_ups_due(
    applications: Iterable[JobApplication],
    now: datetime | None = None,
    window_days: int = DEFAULT_FOLLOW_UP_WINDOW_DAYS,
) -> list[JobApplication]:
    """Applications whose follow-up falls between now and now + ``window_days``.

    Results are ordered by follow-up date, earliest first.
    """
    now = _resolve_now(now)
    horizon = now + timedelta(days=window_days)
    due = [
        a
        for a in applications
        if a.follow_up_date is not None and now <= a.follow_up_date <= horizon
    ]
    due.sort(key=lambda a: a.follow_up_date or FAR_FUTURE)
    return due


def applied_since(
    applications: Iterable[JobApplication], since: datetime
) -> list[JobApplication]:
    return [a for a in applications if a.application_date >= since]


def this_week(
    applications: Iterable[JobApplication],
    now: datetime | None = None,
    window_days: int = DEFAULT_RECENT_WINDOW_DAYS,
) -> list[JobApplication]:
    """Applications sent within the last ``window_days`` days."""
    now = _resolve_now(now)
    return applied_since(applications, now - timedelta(days=window_days))


def last_week_count(
    applications: Iterable[JobApplication], now: datetime | None = None
) -> int:
    """Number of applications sent between two weeks and one week ago."""
    now = _resolve_now(now)
    two_weeks_ago = now - timedelta(weeks=2)
    one_week_ago = now - timedelta(weeks=1)
    return sum(
        1 for a in applications if two_weeks_ago <= a.application_date < one_week_ago
    )


def active_applications(
    applications: Iterable[JobApplication],
) -> list[JobApplication]:
    return [a for a in applications if not a.status.is_terminal]


def successful_applications(
    applications: Iterable[JobApplication],
) -> list[JobApplication]:
    return [a for a in applications if a.status == ApplicationStatus.OFFER]


def status_distribution(
    applications: Sequence[JobApplication],
) -> dict[ApplicationStatus, int]:
    """Non-zero counts per status, in funnel order."""
    counts = {status: 0 for status in ApplicationStatus}
    for application in applications:
        counts[application.status] += 1
    return {status: count for status, count in counts.items() if count > 0}


def priority_distribution(
    applications: Sequence[JobApplication],
) -> dict[Priority, int]:
    """Non-zero counts per priority, from low to urgent."""
    counts = {priority: 0 for priority in Priority}
    for application in applications:
        counts[application.priority] += 1
    return {priority: count for priority, count in counts.items() if count > 0}


def timeline(
    applications: Sequence[JobApplication],
    time_range: TimeRange = TimeRange.MONTH,
    now: datetime | None = None,
) -> Timeline:
    """Count applications per calendar day from ``now - days`` through ``now``."""
    now = _resolve_now(now)
    per_day: dict = {}
    for application in applications:
        day = application.application_date.astimezone(now.tzinfo).date()
        per_day[day] = per_day.get(day, 0) + 1

    points = []
    current = now - timedelta(days=time_range.days)
    while current <= now:
        points.append(
            TimelinePoint(date=current, applications=per_day.get(current.date(), 0))
        )
        current += timedelta(days=1)
    return Timeline(time_range=time_range, points=points)


def generate_insights(
    applications: Sequence[JobApplication],
    now: datetime | None = None,
    follow_up_window_days: int = DEFAULT_FOLLOW_UP_WINDOW_DAYS,
) -> list[str]:
    """Turn the current statistics into short recommendations."""
    stats = compute_stats(applications)
    insights: list[str] = []

    if stats.total < 5:
        insights.append(
            "You're just getting started! Aim for 5-10 applications per week "
            "for better results."
        )

    if stats.interview_rate < 15:
        insights.append(
            "Your interview rate is below average. Consider tailoring your resume "
            "and cover letter for each application."
        )

    if stats.success_rate < 5 and stats.interviews > 0:
        insights.append(
            "Focus on interview preparation. Practice common questions and "
            "research the companies thoroughly."
        )

    follow_ups = len(follow_ups_due(applications, now, follow_up_window_days))
    if follow_ups > 0:
        insights.append(
            f"You have {follow_ups} follow-ups due soon. Don't forget to reach out!"
        )

    if len(high_priority(applications)) > stats.total // 2:
        insights.append(
            "Most of your applications are high priority. Consider spreading your "
            "efforts across different priority levels."
        )

    if not insights:
        insights.append("Keep up the great work! Your application strategy looks solid.")

    return insights


class ApplicationAnalytics:
    """Analytics over the current contents of a repository.

    Each call takes a fresh snapshot, so results always reflect the
    collection at the time of the call.
    """

    def __init__(
        self,
        repository: ApplicationRepository,
        settings: Settings | None = None,
    ):
        """Initialize the analytics engine.

        Args:
            repository: The repository to read from.
            settings: Optional Settings. Uses global settings if not provided.
        """
        if settings is None:
            from applywise.config.settings import get_settings

            settings = get_settings()
        self.repository = repository
        self.follow_up_window_days = settings.follow_up_window_days
        self.recent_window_days = settings.recent_window_days

    def stats(self) -> ApplicationStats:
        return compute_stats(self.repository.list_all())

    def high_priority(self) -> list[JobApplication]:
        return high_priority(self.repository.list_all())

    def follow_ups_due(self, now: datetime | None = None) -> list[JobApplication]:
        return follow_ups_due(
            self.repository.list_all(), now, self.follow_up_window_days
        )

    def this_week(self, now: datetime | None = None) -> list[JobApplication]:
        return this_week(self.repository.list_all(), now, self.recent_window_days)

    def last_week_count(self, now: datetime | None = None) -> int:
        return last_week_count(self.repository.list_all(), now)

    def active_applications(self) -> list[JobApplication]:
        return active_applications(self.repository.list_all())

    def successful_applications(self) -> list[JobApplication]:
        return successful_applications(self.repository.list_all())

    def status_distribution(self) -> dict[ApplicationStatus, int]:
        return status_distribution(self.repository.list_all())

    def priority_distribution(self) -> dict[Priority, int]:
        return priority_distribution(self.repository.list_all())

    def timeline(
        self, time_range: TimeRange = TimeRange.MONTH, now: datetime | None = None
    ) -> Timeline:
        return timeline(self.repository.list_all(), time_range, now)

    def insights(self, now: datetime | None = None) -> list[str]:
        return generate_insights(
            self.repository.list_all(), now, self.follow_up_window_days
        )
