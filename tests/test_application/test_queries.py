"""
Tests for RecordQueryService (filtering, ordering, limits)
"""
from datetime import timedelta, timezone

import pytest

from screentime.application.errors import NotFoundError
from screentime.application.queries import (
    AdjustmentFilter,
    RecordQueryService,
    TimeEntryFilter,
)


@pytest.fixture
def history(repo, clock):
    """
    Two types and five adjustments, one minute apart; adjustments 3 and 4
    share a timestamp.
    """
    cleaned = repo.create_adjustment_type("Cleaned room", 30)
    late = repo.create_adjustment_type("Stayed up late", -15)

    adjustments = [repo.create_adjustment(cleaned.id, "first")]
    clock.advance(minutes=1)
    adjustments.append(repo.create_adjustment(late.id, "second"))
    clock.advance(minutes=1)
    adjustments.append(repo.create_adjustment(cleaned.id, "third"))
    adjustments.append(repo.create_adjustment(cleaned.id, "fourth"))
    clock.advance(minutes=1)
    adjustments.append(repo.create_adjustment(late.id, "fifth"))
    return {"cleaned": cleaned, "late": late, "adjustments": adjustments}


def _descriptions(adjustments):
    return [a.description for a in adjustments]


def test_list_adjustments_most_recent_first(db_session, history):
    """created_at DESC with id DESC breaking ties"""
    result = RecordQueryService(db_session).list_adjustments(AdjustmentFilter())
    assert _descriptions(result) == ["fifth", "fourth", "third", "second", "first"]


def test_list_adjustments_without_filter_is_unbounded(db_session, history):
    assert len(RecordQueryService(db_session).list_adjustments()) == 5


@pytest.mark.parametrize("limit, expected", [(0, 0), (1, 1), (3, 3), (5, 5), (50, 5)])
def test_list_adjustments_limit(db_session, history, limit, expected):
    result = RecordQueryService(db_session).list_adjustments(AdjustmentFilter(limit=limit))
    assert len(result) == expected
    assert _descriptions(result) == ["fifth", "fourth", "third", "second", "first"][:expected]


def test_list_adjustments_by_type(db_session, history):
    service = RecordQueryService(db_session)
    late = service.list_adjustments(AdjustmentFilter(type=history["late"].id))
    assert _descriptions(late) == ["fifth", "second"]
    assert all(a.minutes == -15 for a in late)


def test_list_adjustments_unknown_type_is_empty(db_session, history):
    assert RecordQueryService(db_session).list_adjustments(AdjustmentFilter(type=999)) == []


def test_list_adjustments_since_is_inclusive(db_session, history, clock):
    since = history["adjustments"][2].created_at.replace(tzinfo=timezone.utc)
    result = RecordQueryService(db_session).list_adjustments(AdjustmentFilter(since=since))
    assert _descriptions(result) == ["fifth", "fourth", "third"]
    assert all(a.created_at.replace(tzinfo=timezone.utc) >= since for a in result)


def test_list_adjustments_since_in_future_is_empty(db_session, history, clock):
    future = clock.now + timedelta(days=1)
    assert RecordQueryService(db_session).list_adjustments(AdjustmentFilter(since=future)) == []


def test_list_adjustments_since_accepts_naive_utc(db_session, history, clock):
    since = clock.now.replace(tzinfo=None)
    result = RecordQueryService(db_session).list_adjustments(AdjustmentFilter(since=since))
    assert _descriptions(result) == ["fifth"]


def test_list_adjustments_combined_filters(db_session, history):
    service = RecordQueryService(db_session)
    since = history["adjustments"][1].created_at
    result = service.list_adjustments(
        AdjustmentFilter(type=history["cleaned"].id, since=since, limit=1)
    )
    assert _descriptions(result) == ["fourth"]


def test_list_time_entries(repo, db_session, clock):
    repo.create_time_entry(10)
    clock.advance(minutes=5)
    repo.create_time_entry(20)
    repo.create_time_entry(30)
    clock.advance(minutes=5)
    repo.create_time_entry(40)

    service = RecordQueryService(db_session)
    assert [e.time for e in service.list_time_entries()] == [40, 30, 20, 10]
    assert [e.time for e in service.list_time_entries(TimeEntryFilter(limit=2))] == [40, 30]
    assert service.list_time_entries(TimeEntryFilter(limit=0)) == []

    since = clock.now - timedelta(minutes=5)
    assert [e.time for e in service.list_time_entries(TimeEntryFilter(since=since))] == [40, 30, 20]
    assert service.list_time_entries(TimeEntryFilter(since=clock.now + timedelta(seconds=1))) == []


def test_list_adjustment_types_in_creation_order(repo, db_session):
    for description, minutes in [("B", 5), ("A", -5), ("C", 10)]:
        repo.create_adjustment_type(description, minutes)

    types = RecordQueryService(db_session).list_adjustment_types()
    assert [t.description for t in types] == ["B", "A", "C"]
    assert [t.id for t in types] == sorted(t.id for t in types)


def test_get_missing_records(db_session):
    service = RecordQueryService(db_session)
    with pytest.raises(NotFoundError):
        service.get_adjustment(1)
    with pytest.raises(NotFoundError):
        service.get_time_entry(1)
    with pytest.raises(NotFoundError):
        service.get_adjustment_type(1)


def test_listings_keep_insertion_order_when_clock_steps_back(repo, db_session, clock):
    """A clock moved backwards must not reorder records created after the step"""
    adjustment_type = repo.create_adjustment_type("Cleaned room", 30)
    first = repo.create_adjustment(adjustment_type.id, "first")
    repo.create_time_entry(10)
    clock.advance(seconds=-5)
    second = repo.create_adjustment(adjustment_type.id, "second")
    repo.create_time_entry(20)

    service = RecordQueryService(db_session)
    assert _descriptions(service.list_adjustments()) == ["second", "first"]
    assert second.created_at >= first.created_at
    assert [e.time for e in service.list_time_entries()] == [20, 10]
