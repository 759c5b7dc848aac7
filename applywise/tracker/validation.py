"""Validation rules for tracked items and job applications.

Validation is a gate run before an entity is admitted to the repository
(or explicitly saved). The repository itself does not re-validate on later
field changes.
"""

from __future__ import annotations

import re

from applywise.tracker.errors import ErrorKind, TrackerError
from applywise.tracker.models import JobApplication, Trackable

# local@domain.tld, TLD of 2-64 letters
EMAIL_PATTERN = re.compile(
    r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,64}",
    re.IGNORECASE,
)


def is_valid_email(email: str) -> bool:
    """Return True when ``email`` matches the accepted address syntax."""
    return EMAIL_PATTERN.fullmatch(email) is not None


def validate_contact(application: JobApplication) -> None:
    """Check the contact email of an application.

    An empty email is always accepted.

    Raises:
        TrackerError: INVALID_EMAIL when the email is set but malformed.
    """
    email = application.contact_email
    if email and not is_valid_email(email):
        raise TrackerError(ErrorKind.INVALID_EMAIL, email)


def validate(item: Trackable) -> None:
    """Check the required fields of a tracked item.

    Every item needs a title. A job application additionally needs a company
    name and a job title, and its contact email is checked.

    Args:
        item: A TrackedItem or JobApplication.

    Raises:
        TrackerError: EMPTY_FIELDS or INVALID_EMAIL.
    """
    if not item.title:
        raise TrackerError(ErrorKind.EMPTY_FIELDS, "title")

    if isinstance(item, JobApplication):
        if not item.company_name or not item.job_title:
            raise TrackerError(ErrorKind.EMPTY_FIELDS, "company_name/job_title")
        validate_contact(item)


def validation_error(item: Trackable) -> ErrorKind | None:
    """Return the kind of validation failure for ``item``, or None if it is valid."""
    try:
        validate(item)
    except TrackerError as e:
        return e.kind
    return None
