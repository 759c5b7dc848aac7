"""Application tracking, statistics and list queries.

Public API:
- TrackerService: Creation, validated saves, status moves and bulk edits
- ApplicationRepository: In-memory store with change notifications
- ApplicationAnalytics: Statistics and derived queries over the store
- JobApplication / TrackedItem: Data models
- ApplicationStatus / Priority: Enums for status and priority
- TrackerError / ErrorKind: Error taxonomy
- QueryCriteria / SortOrder: Search, filter and sort criteria
"""

from applywise.tracker.analytics import ApplicationAnalytics, ApplicationStats, TimeRange
from applywise.tracker.errors import ErrorKind, TrackerError
from applywise.tracker.loader import SnapshotLoader
from applywise.tracker.models import (
    ApplicationStatus,
    JobApplication,
    Priority,
    Trackable,
    TrackedItem,
)
from applywise.tracker.query import (
    ApplicationGroup,
    QueryCriteria,
    SortOrder,
    apply_query,
    group_applications,
)
from applywise.tracker.repository import ApplicationRepository, ChangeEvent, ChangeKind
from applywise.tracker.service import TrackerService
from applywise.tracker.validation import validate, validate_contact, validation_error

__all__ = [
    "TrackerService",
    "ApplicationRepository",
    "ChangeEvent",
    "ChangeKind",
    "ApplicationAnalytics",
    "ApplicationStats",
    "TimeRange",
    "SnapshotLoader",
    "JobApplication",
    "TrackedItem",
    "Trackable",
    "ApplicationStatus",
    "Priority",
    "TrackerError",
    "ErrorKind",
    "QueryCriteria",
    "SortOrder",
    "ApplicationGroup",
    "apply_query",
    "group_applications",
    "validate",
    "validate_contact",
    "validation_error",
]
