"""Integration tests for the tracker workflow."""

from datetime import UTC, datetime, timedelta

import pytest
import yaml

from applywise.tracker import (
    ApplicationAnalytics,
    ApplicationRepository,
    ApplicationStatus,
    ChangeKind,
    ErrorKind,
    Priority,
    QueryCriteria,
    SnapshotLoader,
    SortOrder,
    TrackerError,
    TrackerService,
    apply_query,
    group_applications,
)


@pytest.fixture
def tracker(settings):
    repository = ApplicationRepository()
    return (
        repository,
        TrackerService(repository, settings),
        ApplicationAnalytics(repository, settings),
    )


def test_full_application_lifecycle(tracker):
    """Create, edit, advance and delete applications while analytics follow."""
    repository, service, analytics = tracker
    events = []
    repository.subscribe(events.append)

    apple = service.save(
        service.create_application(
            "Apple Inc",
            "Senior iOS Developer",
            priority=Priority.HIGH,
            contact_email="jobs@apple.com",
            location="Cupertino, CA",
        )
    )
    google = service.save(service.create_application("Google", "Mobile Developer"))
    netflix = service.save(
        service.create_application("Netflix", "iOS Developer", priority=Priority.LOW)
    )

    with pytest.raises(TrackerError) as exc_info:
        service.save(service.create_application("", "Engineer"))
    assert exc_info.value.kind == ErrorKind.EMPTY_FIELDS
    assert analytics.stats().total == 3

    service.advance_status(apple.id)
    service.advance_status(apple.id)
    service.change_status(google.id, ApplicationStatus.OFFER)
    service.change_status(netflix.id, ApplicationStatus.REJECTED)
    service.schedule_follow_up(apple.id, days=1)

    stats = analytics.stats()
    assert (stats.interviews, stats.offers, stats.rejections) == (1, 1, 1)
    assert analytics.follow_ups_due() == [apple]
    assert [a.id for a in analytics.active_applications()] == [apple.id, google.id]

    criteria = QueryCriteria(search_text="developer", sort_order=SortOrder.STATUS)
    results = apply_query(repository.list_all(), criteria)
    groups = group_applications(results, criteria.sort_order)
    assert [g.key for g in groups] == [
        ApplicationStatus.INTERVIEWING,
        ApplicationStatus.OFFER,
        ApplicationStatus.REJECTED,
    ]

    assert service.delete([netflix.id]) == 1
    assert analytics.stats().total == 2
    assert events[0].kind == ChangeKind.ADDED
    assert events[-1].kind == ChangeKind.DELETED
    assert repository.version == len(events)


def test_snapshot_round_trip_through_repository(tracker, tmp_path):
    """Applications written as a snapshot load back unchanged."""
    repository, service, analytics = tracker
    follow_up = datetime.now(UTC) + timedelta(days=2)
    for company in ("Apple", "Google"):
        app = service.save(service.create_application(company, "Engineer"))
        service.schedule_follow_up(app.id, follow_up)

    path = tmp_path / "applications.yaml"
    path.write_text(
        yaml.safe_dump({"applications": [a.to_dict() for a in repository.list_all()]})
    )

    restored = ApplicationRepository()
    SnapshotLoader().load_into(path, restored)

    assert restored.list_all() == repository.list_all()
    assert len(ApplicationAnalytics(restored).follow_ups_due()) == 2
