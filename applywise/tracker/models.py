"""Data models for the application tracker.

Two record types share the tracked-item fields (id, title, priority,
timestamps, notes): ``TrackedItem`` for generic work items and
``JobApplication``, a flattened record that adds the job-specific fields.
They are related through the ``Trackable`` protocol rather than inheritance.

Once a record is constructed, assigning any tracked field refreshes
``last_updated_date``. ``id`` and ``created_date`` cannot be reassigned.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time
from enum import Enum
from typing import Any, Protocol

from applywise.tracker.errors import ErrorKind, TrackerError


def utc_now() -> datetime:
    return datetime.now(UTC)


class Priority(str, Enum):
    """User-assigned urgency of a tracked item."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"

    @property
    def weight(self) -> int:
        """Numeric weight used for sorting (1 = low, 4 = urgent)."""
        return _PRIORITY_WEIGHTS[self]

    @property
    def color(self) -> str:
        return _PRIORITY_COLORS[self]


_PRIORITY_WEIGHTS = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
    Priority.URGENT: 4,
}

_PRIORITY_COLORS = {
    Priority.LOW: "green",
    Priority.MEDIUM: "yellow",
    Priority.HIGH: "orange",
    Priority.URGENT: "red",
}


class ApplicationStatus(str, Enum):
    """Position of an application in the hiring funnel.

    Any status may be set from any other; ``next_status`` only describes the
    usual forward step.
    """

    APPLIED = "Applied"
    SCREENING = "Screening"
    INTERVIEWING = "Interviewing"
    OFFER = "Offer"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"

    @property
    def order(self) -> int:
        """Numeric position used by the status sort (1 = applied)."""
        return _STATUS_ORDER[self]

    @property
    def color(self) -> str:
        return _STATUS_COLORS[self]

    @property
    def is_terminal(self) -> bool:
        return self in (ApplicationStatus.REJECTED, ApplicationStatus.WITHDRAWN)

    @property
    def next_status(self) -> ApplicationStatus | None:
        """Next step in the funnel, or None once an outcome is reached."""
        return _NEXT_STATUS.get(self)


_STATUS_ORDER = {status: index for index, status in enumerate(ApplicationStatus, 1)}

_STATUS_COLORS = {
    ApplicationStatus.APPLIED: "blue",
    ApplicationStatus.SCREENING: "orange",
    ApplicationStatus.INTERVIEWING: "purple",
    ApplicationStatus.OFFER: "green",
    ApplicationStatus.REJECTED: "red",
    ApplicationStatus.WITHDRAWN: "gray",
}

_NEXT_STATUS = {
    ApplicationStatus.APPLIED: ApplicationStatus.SCREENING,
    ApplicationStatus.SCREENING: ApplicationStatus.INTERVIEWING,
    ApplicationStatus.INTERVIEWING: ApplicationStatus.OFFER,
}


class Trackable(Protocol):
    """Fields shared by every tracked record."""

    id: str
    title: str
    priority: Priority
    created_date: datetime
    last_updated_date: datetime
    notes: str

    def update_last_modified(self) -> None: ...


_IMMUTABLE_FIELDS = frozenset({"id", "created_date"})


def as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC so every comparison is aware.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _touch(record: Any) -> None:
    now = utc_now()
    previous = record.__dict__.get("last_updated_date")
    if previous is not None and previous > now:
        now = previous
    object.__setattr__(record, "last_updated_date", now)


def _assign(record: Any, name: str, value: Any, tracked: frozenset[str]) -> None:
    if not record.__dict__.get("_ready", False):
        object.__setattr__(record, name, value)
        return
    if name in _IMMUTABLE_FIELDS:
        raise AttributeError(f"{name} cannot be changed after creation")
    if isinstance(value, datetime):
        value = as_utc(value)
    object.__setattr__(record, name, value)
    if name in tracked:
        _touch(record)


def _parse_datetime(value: str | date | None, key: str) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time(), tzinfo=UTC)
    try:
        return as_utc(datetime.fromisoformat(value))
    except (TypeError, ValueError) as e:
        raise TrackerError(ErrorKind.INVALID_DATE, f"{key}: {value!r}") from e


def _required(data: dict, key: str) -> Any:
    try:
        return data[key]
    except KeyError as e:
        raise TrackerError(ErrorKind.SAVE_FAILED, f"missing field {key}") from e


def _text(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise TrackerError(
            ErrorKind.SAVE_FAILED, f"{key}: expected text, got {value!r}"
        )
    return value


def _optional_text(data: dict, key: str) -> str:
    # A key written with no value (`location:` in YAML) reads as blank.
    value = data.get(key)
    return "" if value is None else _text(value, key)


def _parse_enum(enum_cls: type[Enum], value: Any, key: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError as e:
        raise TrackerError(ErrorKind.SAVE_FAILED, f"{key}: {value!r}") from e


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


_ITEM_TRACKED = frozenset({"title", "priority", "notes"})


@dataclass
class TrackedItem:
    """A generic trackable work item.

    Attributes:
        title: Free-text title; must be non-empty to pass validation.
        priority: Urgency of the item.
        notes: Free-text notes.
        id: Globally unique identifier, fixed at creation.
        created_date: When the item was created, fixed at creation.
        last_updated_date: Refreshed whenever a tracked field changes.
    """

    title: str
    priority: Priority = Priority.MEDIUM
    notes: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_date: datetime = field(default_factory=utc_now)
    last_updated_date: datetime | None = None
    _ready: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.priority = Priority(self.priority)
        self.created_date = as_utc(self.created_date)
        if self.last_updated_date is None:
            self.last_updated_date = self.created_date
        else:
            self.last_updated_date = as_utc(self.last_updated_date)
        object.__setattr__(self, "_ready", True)

    def __setattr__(self, name: str, value: Any) -> None:
        _assign(self, name, value, _ITEM_TRACKED)

    def update_last_modified(self) -> None:
        """Set ``last_updated_date`` to now (never earlier than its current value)."""
        _touch(self)

    def to_dict(self) -> dict:
        """Serialize the item to its at-rest field set."""
        return {
            "id": self.id,
            "title": self.title,
            "priority": self.priority.value,
            "createdDate": _isoformat(self.created_date),
            "lastUpdatedDate": _isoformat(self.last_updated_date),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> TrackedItem:
        """Deserialize an item from its at-rest field set."""
        return cls(
            id=_required(data, "id"),
            title=_text(_required(data, "title"), "title"),
            priority=_parse_enum(Priority, data.get("priority", "Medium"), "priority"),
            created_date=_parse_datetime(
                _required(data, "createdDate"), "createdDate"
            ),
            last_updated_date=_parse_datetime(
                data.get("lastUpdatedDate"), "lastUpdatedDate"
            ),
            notes=_optional_text(data, "notes"),
        )


_APPLICATION_TRACKED = _ITEM_TRACKED | frozenset(
    {
        "company_name",
        "job_title",
        "application_date",
        "status",
        "follow_up_date",
        "salary",
        "location",
        "contact_email",
        "contact_name",
    }
)


@dataclass
class JobApplication:
    """One employer/role being pursued.

    The title is always ``"{job_title} at {company_name}"``: it is derived at
    construction, recomputed when either part is reassigned, and cannot be
    set directly.

    Attributes:
        company_name: Employer name; required.
        job_title: Role title; required.
        contact_email: Recruiter or hiring contact email (optional).
        contact_name: Contact person's name (optional).
        notes: Free-text notes.
        salary: Salary text as advertised.
        location: Location text.
        priority: Urgency of the application.
        status: Funnel position; new applications start as Applied.
        application_date: When the application was sent.
        follow_up_date: Optional reminder to re-contact the employer.
        id: Globally unique identifier, fixed at creation.
        created_date: When the record was created, fixed at creation.
        last_updated_date: Refreshed whenever a tracked field changes.
    """

    company_name: str
    job_title: str
    contact_email: str = ""
    contact_name: str = ""
    notes: str = ""
    salary: str = ""
    location: str = ""
    priority: Priority = Priority.MEDIUM
    status: ApplicationStatus = ApplicationStatus.APPLIED
    application_date: datetime | None = None
    follow_up_date: datetime | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_date: datetime = field(default_factory=utc_now)
    last_updated_date: datetime | None = None
    title: str = field(default="", init=False)
    _ready: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.priority = Priority(self.priority)
        self.status = ApplicationStatus(self.status)
        self.created_date = as_utc(self.created_date)
        if self.application_date is None:
            self.application_date = utc_now()
        else:
            self.application_date = as_utc(self.application_date)
        if self.follow_up_date is not None:
            self.follow_up_date = as_utc(self.follow_up_date)
        if self.last_updated_date is None:
            self.last_updated_date = self.created_date
        else:
            self.last_updated_date = as_utc(self.last_updated_date)
        self.title = self.derive_title(self.job_title, self.company_name)
        object.__setattr__(self, "_ready", True)

    def __setattr__(self, name: str, value: Any) -> None:
        ready = self.__dict__.get("_ready", False)
        if ready and name == "title":
            raise AttributeError("title is derived from job_title and company_name")
        _assign(self, name, value, _APPLICATION_TRACKED)
        if ready and name in ("company_name", "job_title"):
            object.__setattr__(
                self, "title", self.derive_title(self.job_title, self.company_name)
            )

    @staticmethod
    def derive_title(job_title: str, company_name: str) -> str:
        return f"{job_title} at {company_name}"

    def update_status(self, status: ApplicationStatus) -> None:
        """Move the application to ``status`` and refresh the timestamp.

        No transition rules apply: any status is accepted from any status.
        """
        self.status = ApplicationStatus(status)
        self.update_last_modified()

    def update_last_modified(self) -> None:
        """Set ``last_updated_date`` to now (never earlier than its current value)."""
        _touch(self)

    def to_dict(self) -> dict:
        """Serialize the application to its at-rest field set.

        Returns:
            Dictionary with the tracked-item keys plus the job-specific keys.
        """
        return {
            "id": self.id,
            "title": self.title,
            "priority": self.priority.value,
            "createdDate": _isoformat(self.created_date),
            "lastUpdatedDate": _isoformat(self.last_updated_date),
            "notes": self.notes,
            "companyName": self.company_name,
            "jobTitle": self.job_title,
            "applicationDate": _isoformat(self.application_date),
            "status": self.status.value,
            "followUpDate": _isoformat(self.follow_up_date),
            "salary": self.salary,
            "location": self.location,
            "contactEmail": self.contact_email,
            "contactName": self.contact_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> JobApplication:
        """Deserialize an application from its at-rest field set.

        The stored ``title`` is not read back; it is derived again from the
        job title and company name.

        Args:
            data: Dictionary in the shape produced by ``to_dict``.

        Returns:
            JobApplication instance.

        Raises:
            TrackerError: INVALID_DATE for unparseable timestamps, SAVE_FAILED
                for missing required keys, non-text fields or unknown enum labels.
        """
        return cls(
            id=_required(data, "id"),
            company_name=_text(_required(data, "companyName"), "companyName"),
            job_title=_text(_required(data, "jobTitle"), "jobTitle"),
            priority=_parse_enum(Priority, data.get("priority", "Medium"), "priority"),
            status=_parse_enum(
                ApplicationStatus, data.get("status", "Applied"), "status"
            ),
            created_date=_parse_datetime(
                _required(data, "createdDate"), "createdDate"
            ),
            last_updated_date=_parse_datetime(
                data.get("lastUpdatedDate"), "lastUpdatedDate"
            ),
            application_date=_parse_datetime(
                data.get("applicationDate"), "applicationDate"
            ),
            follow_up_date=_parse_datetime(data.get("followUpDate"), "followUpDate"),
            notes=_optional_text(data, "notes"),
            salary=_optional_text(data, "salary"),
            location=_optional_text(data, "location"),
            contact_email=_optional_text(data, "contactEmail"),
            contact_name=_optional_text(data, "contactName"),
        )
