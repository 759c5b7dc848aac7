"""Tests for search, filtering, sorting and grouping."""

from datetime import timedelta

import pytest

from applywise.tracker.models import ApplicationStatus, Priority
from applywise.tracker.query import QueryCriteria, SortOrder


@pytest.fixture
def sample(make_application, now):
    """Three applications on distinct days, oldest first."""
    return [
        make_application(
            "apple",
            "iOS Developer",
            location="Cupertino, CA",
            priority=Priority.LOW,
            status=ApplicationStatus.OFFER,
            application_date=now - timedelta(days=3),
        ),
        make_application(
            "Microsoft",
            "Backend Engineer",
            notes="Referral from Dana",
            salary="$150,000",
            priority=Priority.URGENT,
            status=ApplicationStatus.APPLIED,
            application_date=now - timedelta(days=2),
        ),
        make_application(
            "Banana Labs",
            "Mobile Developer",
            location="Remote",
            priority=Priority.HIGH,
            status=ApplicationStatus.INTERVIEWING,
            application_date=now - timedelta(days=1),
        ),
    ]


def companies(applications):
    return [a.company_name for a in applications]


class TestSearch:
    """Test free-text search."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("APPLE", ["apple"]),
            ("developer", ["apple", "Banana Labs"]),
            ("remote", ["Banana Labs"]),
            ("dana", ["Microsoft"]),
            ("", ["apple", "Microsoft", "Banana Labs"]),
        ],
    )
    def test_search_fields(self, sample, text, expected):
        """Search covers company, job title, location and notes, ignoring case."""
        from applywise.tracker.query import filter_applications

        result = filter_applications(sample, QueryCriteria(search_text=text))
        assert companies(result) == expected

    def test_salary_is_not_searched(self, sample):
        from applywise.tracker.query import filter_applications

        assert filter_applications(sample, QueryCriteria(search_text="150,000")) == []


class TestFilters:
    """Test status and priority filters."""

    def test_status_filter(self, sample):
        from applywise.tracker.query import filter_applications

        criteria = QueryCriteria(status=ApplicationStatus.OFFER)
        assert companies(filter_applications(sample, criteria)) == ["apple"]

    def test_filters_combine_with_search(self, sample):
        from applywise.tracker.query import filter_applications

        criteria = QueryCriteria(search_text="developer", priority=Priority.HIGH)
        assert companies(filter_applications(sample, criteria)) == ["Banana Labs"]

    def test_filters_that_exclude_everything(self, sample):
        from applywise.tracker.query import filter_applications

        criteria = QueryCriteria(
            status=ApplicationStatus.OFFER, priority=Priority.URGENT
        )
        assert filter_applications(sample, criteria) == []

    def test_has_active_filters(self):
        from applywise.tracker.query import has_active_filters

        assert not has_active_filters(QueryCriteria(search_text="apple"))
        assert has_active_filters(QueryCriteria(status=ApplicationStatus.APPLIED))
        assert has_active_filters(QueryCriteria(priority=Priority.LOW))

    def test_criteria_accept_labels(self):
        criteria = QueryCriteria(
            status="Interviewing", priority="High", sort_order="Company A-Z"
        )

        assert criteria.status == ApplicationStatus.INTERVIEWING
        assert criteria.priority == Priority.HIGH
        assert criteria.sort_order == SortOrder.COMPANY_AZ


class TestSort:
    """Test every sort order."""

    @pytest.mark.parametrize(
        "order, expected",
        [
            (SortOrder.DATE_DESCENDING, ["Banana Labs", "Microsoft", "apple"]),
            (SortOrder.DATE_ASCENDING, ["apple", "Microsoft", "Banana Labs"]),
            (SortOrder.COMPANY_AZ, ["apple", "Banana Labs", "Microsoft"]),
            (SortOrder.COMPANY_ZA, ["Microsoft", "Banana Labs", "apple"]),
            (SortOrder.PRIORITY_HIGH, ["Microsoft", "Banana Labs", "apple"]),
            (SortOrder.PRIORITY_LOW, ["apple", "Banana Labs", "Microsoft"]),
            (SortOrder.STATUS, ["Microsoft", "Banana Labs", "apple"]),
        ],
    )
    def test_sort_orders(self, sample, order, expected):
        from applywise.tracker.query import sort_applications

        assert companies(sort_applications(sample, order)) == expected

    def test_company_orders_are_exact_reverses(self, sample):
        from applywise.tracker.query import sort_applications

        ascending = sort_applications(sample, SortOrder.COMPANY_AZ)
        descending = sort_applications(sample, SortOrder.COMPANY_ZA)

        assert descending == list(reversed(ascending))

    def test_equal_keys_keep_relative_order(self, make_application):
        from applywise.tracker.query import sort_applications

        apps = [make_application(f"Company {i}") for i in range(4)]
        for app in apps:
            app.priority = Priority.HIGH

        assert sort_applications(apps, SortOrder.PRIORITY_HIGH) == apps
        assert sort_applications(apps, SortOrder.STATUS) == apps

    def test_sorting_is_idempotent(self, sample):
        from applywise.tracker.query import sort_applications

        for order in SortOrder:
            once = sort_applications(sample, order)
            assert sort_applications(once, order) == once

    def test_sort_does_not_mutate_input(self, sample):
        from applywise.tracker.query import sort_applications

        before = list(sample)
        sort_applications(sample, SortOrder.COMPANY_ZA)

        assert sample == before

    def test_apply_query_filters_then_sorts(self, sample):
        from applywise.tracker.query import apply_query

        criteria = QueryCriteria(
            search_text="developer", sort_order=SortOrder.COMPANY_ZA
        )
        assert companies(apply_query(sample, criteria)) == ["Banana Labs", "apple"]


class TestGrouping:
    """Test grouping for sectioned list views."""

    def test_status_groups_follow_funnel(self, sample):
        from applywise.tracker.query import group_applications, sort_applications

        ordered = sort_applications(sample, SortOrder.STATUS)
        groups = group_applications(ordered, SortOrder.STATUS)

        assert [g.key for g in groups] == [
            ApplicationStatus.APPLIED,
            ApplicationStatus.INTERVIEWING,
            ApplicationStatus.OFFER,
        ]
        assert all(len(g.applications) == 1 for g in groups)

    def test_priority_groups_start_with_urgent(self, sample):
        from applywise.tracker.query import group_applications

        groups = group_applications(sample, SortOrder.PRIORITY_LOW)

        assert [g.key for g in groups] == [Priority.URGENT, Priority.HIGH, Priority.LOW]

    def test_other_orders_give_a_single_group(self, sample):
        from applywise.tracker.query import group_applications

        groups = group_applications(sample, SortOrder.COMPANY_AZ)

        assert len(groups) == 1
        assert groups[0].key is None
        assert groups[0].applications == sample

    def test_empty_list_with_grouping(self):
        from applywise.tracker.query import group_applications

        assert group_applications([], SortOrder.STATUS) == []
