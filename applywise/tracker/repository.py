"""In-memory repository for the application tracker.

The repository is the single owner of the collection of job applications.
It keeps them in insertion order, stamps every mutation with a version
number, and informs subscribers after each mutating call.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from applywise.tracker.errors import ErrorKind, TrackerError
from applywise.tracker.models import ApplicationStatus, JobApplication

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    """Kind of mutation reported to subscribers."""

    ADDED = "added"
    UPDATED = "updated"
    DELETED = "deleted"
    CLEARED = "cleared"


@dataclass(frozen=True)
class ChangeEvent:
    """Notification sent to subscribers after a mutation."""

    kind: ChangeKind
    application_id: str | None
    version: int


Listener = Callable[[ChangeEvent], None]


class ApplicationRepository:
    """In-memory store of job applications.

    Mutations are serialized by an internal lock. Listeners are called after
    the lock is released, in subscription order.
    """

    def __init__(self) -> None:
        self._applications: list[JobApplication] = []
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()
        self._version = 0

    @property
    def version(self) -> int:
        """Counter incremented by every mutating call."""
        return self._version

    def __len__(self) -> int:
        return len(self._applications)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for change events.

        Args:
            listener: Callable receiving a ChangeEvent.

        Returns:
            A callable that removes the listener again.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def add(self, application: JobApplication) -> None:
        """Append an application to the collection.

        Applications for the same company and role may coexist; only the
        identifier must be unique.

        Raises:
            TrackerError: SAVE_FAILED if an application with the same id is
                already stored.
        """
        with self._lock:
            if self._index_of(application.id) is not None:
                logger.warning("Rejected add of duplicate id %s", application.id)
                raise TrackerError(ErrorKind.SAVE_FAILED, application.id)
            self._applications.append(application)
            event = self._bump(ChangeKind.ADDED, application.id)
        logger.debug("Added application %s (%s)", application.id, application.title)
        self._notify(event)

    def update(self, application: JobApplication) -> None:
        """Replace the stored application that has the same id.

        The stored entity is replaced wholesale by ``application`` and its
        last-modified timestamp is refreshed.

        Raises:
            TrackerError: APPLICATION_NOT_FOUND if no application has that id.
        """
        with self._lock:
            index = self._index_of(application.id)
            if index is None:
                logger.warning("Update of unknown application %s", application.id)
                raise TrackerError(ErrorKind.APPLICATION_NOT_FOUND, application.id)
            self._applications[index] = application
            application.update_last_modified()
            event = self._bump(ChangeKind.UPDATED, application.id)
        logger.debug("Updated application %s", application.id)
        self._notify(event)

    def delete_by_id(self, application_id: str) -> int:
        """Remove every application with the given id.

        Returns:
            The number of applications removed (0 when none matched).
        """
        with self._lock:
            remaining = [a for a in self._applications if a.id != application_id]
            removed = len(self._applications) - len(remaining)
            if not removed:
                return 0
            self._applications = remaining
            event = self._bump(ChangeKind.DELETED, application_id)
        logger.debug("Deleted application %s", application_id)
        self._notify(event)
        return removed

    def clear(self) -> None:
        """Remove all applications."""
        with self._lock:
            self._applications = []
            event = self._bump(ChangeKind.CLEARED, None)
        self._notify(event)

    def get(self, application_id: str) -> JobApplication | None:
        """Get an application by id, or None if it is not stored."""
        with self._lock:
            index = self._index_of(application_id)
            return self._applications[index] if index is not None else None

    def list_all(self) -> list[JobApplication]:
        """Return all applications in insertion order."""
        with self._lock:
            return list(self._applications)

    def list_by_status(self, status: ApplicationStatus) -> list[JobApplication]:
        """Return applications with the given status, in insertion order."""
        with self._lock:
            return [a for a in self._applications if a.status == status]

    def _index_of(self, application_id: str) -> int | None:
        for index, application in enumerate(self._applications):
            if application.id == application_id:
                return index
        return None

    def _bump(self, kind: ChangeKind, application_id: str | None) -> ChangeEvent:
        self._version += 1
        return ChangeEvent(kind=kind, application_id=application_id, version=self._version)

    def _notify(self, event: ChangeEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Change listener failed for %s", event)
