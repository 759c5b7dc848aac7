"""Search, filter, sort and grouping of applications for list views."""

from __future__ import annotations

import locale
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from applywise.tracker.models import ApplicationStatus, JobApplication, Priority


class SortOrder(str, Enum):
    """Orders offered by the list view."""

    DATE_DESCENDING = "Newest First"
    DATE_ASCENDING = "Oldest First"
    COMPANY_AZ = "Company A-Z"
    COMPANY_ZA = "Company Z-A"
    PRIORITY_HIGH = "Priority High-Low"
    PRIORITY_LOW = "Priority Low-High"
    STATUS = "Status"


class QueryCriteria(BaseModel):
    """Client-selected search, filters and sort order."""

    search_text: str = Field(default="", description="Case-insensitive search text")
    status: ApplicationStatus | None = Field(
        default=None, description="Only applications with this status"
    )
    priority: Priority | None = Field(
        default=None, description="Only applications with this priority"
    )
    sort_order: SortOrder = Field(
        default=SortOrder.DATE_DESCENDING, description="Order of the results"
    )


@dataclass
class ApplicationGroup:
    """A section of a grouped list; ``key`` is None for an ungrouped list."""

    key: ApplicationStatus | Priority | None
    applications: list[JobApplication] = field(default_factory=list)


def matches_search(application: JobApplication, search_text: str) -> bool:
    """True when any of company, job title, location or notes contains the text."""
    if not search_text:
        return True
    needle = search_text.casefold()
    return any(
        needle in value.casefold()
        for value in (
            application.company_name,
            application.job_title,
            application.location,
            application.notes,
        )
    )


def has_active_filters(criteria: QueryCriteria) -> bool:
    return criteria.status is not None or criteria.priority is not None


def filter_applications(
    applications: Iterable[JobApplication], criteria: QueryCriteria
) -> list[JobApplication]:
    """Apply the search text, then the status and priority filters."""
    results = [a for a in applications if matches_search(a, criteria.search_text)]
    if criteria.status is not None:
        results = [a for a in results if a.status == criteria.status]
    if criteria.priority is not None:
        results = [a for a in results if a.priority == criteria.priority]
    return results


def _company_key(application: JobApplication) -> str:
    return locale.strxfrm(application.company_name.casefold())


def sort_applications(
    applications: Iterable[JobApplication], order: SortOrder
) -> list[JobApplication]:
    """Return the applications in ``order``.

    Every order is a stable sort, so applications with equal keys keep their
    relative order.
    """
    items = list(applications)
    if order == SortOrder.DATE_DESCENDING:
        return sorted(items, key=lambda a: a.application_date, reverse=True)
    if order == SortOrder.DATE_ASCENDING:
        return sorted(items, key=lambda a: a.application_date)
    if order == SortOrder.COMPANY_AZ:
        return sorted(items, key=_company_key)
    if order == SortOrder.COMPANY_ZA:
        return sorted(items, key=_company_key, reverse=True)
    if order == SortOrder.PRIORITY_HIGH:
        return sorted(items, key=lambda a: a.priority.weight, reverse=True)
    if order == SortOrder.PRIORITY_LOW:
        return sorted(items, key=lambda a: a.priority.weight)
    if order == SortOrder.STATUS:
        return sorted(items, key=lambda a: a.status.order)
    raise ValueError(f"Unknown sort order: {order}")


def apply_query(
    applications: Iterable[JobApplication], criteria: QueryCriteria
) -> list[JobApplication]:
    """Filter and sort applications according to ``criteria``."""
    return sort_applications(
        filter_applications(applications, criteria), criteria.sort_order
    )


def group_applications(
    applications: list[JobApplication], order: SortOrder
) -> list[ApplicationGroup]:
    """Split an already sorted list into sections for display.

    Status order yields one section per status in funnel order. Either
    priority order yields one section per priority from urgent down to low.
    Empty sections are left out. Other orders yield a single section.
    """
    if order == SortOrder.STATUS:
        keys: list = list(ApplicationStatus)
        attribute = "status"
    elif order in (SortOrder.PRIORITY_HIGH, SortOrder.PRIORITY_LOW):
        keys = list(reversed(Priority))
        attribute = "priority"
    else:
        return [ApplicationGroup(key=None, applications=list(applications))]

    groups = []
    for key in keys:
        members = [a for a in applications if getattr(a, attribute) == key]
        if members:
            groups.append(ApplicationGroup(key=key, applications=members))
    return groups
