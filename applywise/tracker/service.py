"""Business logic service for the application tracker.

This module provides the TrackerService class which handles:
- Application creation with factory defaults
- The validation gate in front of the repository
- Status changes, follow-up scheduling and bulk edits
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from applywise.tracker.errors import ErrorKind, TrackerError
from applywise.tracker.models import (
    ApplicationStatus,
    JobApplication,
    Priority,
    as_utc,
    utc_now,
)
from applywise.tracker.repository import ApplicationRepository
from applywise.tracker.validation import validate

if TYPE_CHECKING:
    from applywise.config.settings import Settings

logger = logging.getLogger(__name__)


class TrackerService:
    """High-level operations for tracking job applications.

    The service validates before anything reaches the repository, so a
    rejected save always leaves the collection unchanged.
    """

    def __init__(
        self,
        repository: ApplicationRepository,
        settings: Settings | None = None,
    ):
        """Initialize the service.

        Args:
            repository: The ApplicationRepository holding the collection.
            settings: Optional Settings. Uses global settings if not provided.
        """
        if settings is None:
            from applywise.config.settings import get_settings

            settings = get_settings()
        self.repository = repository
        self.settings = settings

    def create_application(
        self,
        company_name: str,
        job_title: str,
        *,
        priority: Priority | None = None,
        contact_email: str = "",
        contact_name: str = "",
        notes: str = "",
        salary: str = "",
        location: str = "",
        follow_up_date: datetime | None = None,
    ) -> JobApplication:
        """Build a new application with factory defaults.

        The application gets a new id, "now" timestamps and the Applied
        status. It is not stored; pass it to ``save`` for that.
        """
        return JobApplication(
            company_name=company_name,
            job_title=job_title,
            priority=priority or self.settings.default_priority,
            contact_email=contact_email,
            contact_name=contact_name,
            notes=notes,
            salary=salary,
            location=location,
            follow_up_date=follow_up_date,
        )

    def save(self, application: JobApplication) -> JobApplication:
        """Validate an application, then add it or update the stored copy.

        Args:
            application: The application to store.

        Returns:
            The stored application.

        Raises:
            TrackerError: EMPTY_FIELDS or INVALID_EMAIL when validation fails.
        """
        try:
            validate(application)
        except TrackerError as e:
            logger.warning(
                "Rejected application %s: %s", application.id, e.kind.value
            )
            raise

        if self.repository.get(application.id) is None:
            self.repository.add(application)
            logger.info("Tracking new application: %s", application.title)
        else:
            self.repository.update(application)
        return application

    def get(self, application_id: str) -> JobApplication:
        """Get a stored application.

        Raises:
            TrackerError: APPLICATION_NOT_FOUND if no application has that id.
        """
        application = self.repository.get(application_id)
        if application is None:
            raise TrackerError(ErrorKind.APPLICATION_NOT_FOUND, application_id)
        return application

    def change_status(
        self, application_id: str, status: ApplicationStatus
    ) -> JobApplication:
        """Move an application to any status."""
        application = self.get(application_id)
        previous = application.status
        application.update_status(status)
        self.repository.update(application)
        logger.info(
            "%s: %s -> %s", application.title, previous.value, application.status.value
        )
        return application

    def advance_status(self, application_id: str) -> JobApplication | None:
        """Move an application one step forward in the funnel.

        Returns:
            The application, or None when its status has no next step.
        """
        application = self.get(application_id)
        next_status = application.status.next_status
        if next_status is None:
            return None
        return self.change_status(application_id, next_status)

    def schedule_follow_up(
        self,
        application_id: str,
        when: datetime | None = None,
        *,
        days: int | None = None,
    ) -> JobApplication:
        """Set the follow-up reminder of an application.

        Args:
            application_id: The application to update.
            when: Explicit follow-up time.
            days: Days from now; defaults to the configured snooze when
                ``when`` is not given either.

        Raises:
            TrackerError: INVALID_DATE when the follow-up would fall before
                the application date.
        """
        application = self.get(application_id)
        if when is None:
            when = utc_now() + timedelta(
                days=self.settings.snooze_days if days is None else days
            )
        when = as_utc(when)
        if when < application.application_date:
            raise TrackerError(ErrorKind.INVALID_DATE, when.isoformat())
        application.follow_up_date = when
        self.repository.update(application)
        return application

    def clear_follow_up(self, application_id: str) -> JobApplication:
        application = self.get(application_id)
        application.follow_up_date = None
        self.repository.update(application)
        return application

    def set_status(
        self, application_ids: Iterable[str], status: ApplicationStatus
    ) -> list[JobApplication]:
        """Set the same status on several applications.

        Unknown ids are skipped and logged; the others are still updated.
        """
        return [
            self.change_status(application.id, status)
            for application in self._known(application_ids)
        ]

    def set_priority(
        self, application_ids: Iterable[str], priority: Priority
    ) -> list[JobApplication]:
        """Set the same priority on several applications.

        Unknown ids are skipped and logged; the others are still updated.
        """
        updated = []
        for application in self._known(application_ids):
            application.priority = Priority(priority)
            self.repository.update(application)
            updated.append(application)
        return updated

    def delete(self, application_ids: Iterable[str]) -> int:
        """Delete applications by id.

        Returns:
            Number of applications removed.
        """
        removed = sum(self.repository.delete_by_id(i) for i in application_ids)
        if removed:
            logger.info("Deleted %d application(s)", removed)
        return removed

    def _known(self, application_ids: Iterable[str]) -> list[JobApplication]:
        found = []
        for application_id in application_ids:
            application = self.repository.get(application_id)
            if application is None:
                logger.warning("Skipping unknown application %s", application_id)
                continue
            found.append(application)
        return found
