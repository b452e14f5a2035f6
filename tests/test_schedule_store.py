"""
Tests for the append-only schedule store and monitoring timeline.
"""
from datetime import date

from cropdoctor.models import TimelineEventKind, Treatment
from cropdoctor.services.schedule_store import TreatmentScheduleStore
from conftest import make_treatment


def _treatment(i, frequency):
    return Treatment.model_validate(make_treatment(i, frequency=frequency))


def test_schedule_computes_next_date():
    store = TreatmentScheduleStore()
    entry = store.schedule(_treatment(1, "Apply every 10 days"), date(2024, 1, 1))

    assert entry.treatment_id == "t-1"
    assert entry.treatment_name == "Treatment 1"
    assert entry.frequency == "Apply every 10 days"
    assert entry.next_application_date == date(2024, 1, 11)


def test_same_treatment_twice_gives_two_entries():
    store = TreatmentScheduleStore()
    t = _treatment(1, "7 days")
    first = store.schedule(t, date(2024, 3, 1))
    second = store.schedule(t, date(2024, 3, 5))

    assert len(store) == 2
    assert store.entries() == (first, second)
    assert first.next_application_date == date(2024, 3, 8)
    assert second.next_application_date == date(2024, 3, 12)


def test_entries_are_a_snapshot():
    store = TreatmentScheduleStore()
    store.schedule(_treatment(1, "7 days"), date(2024, 3, 1))
    snapshot = store.entries()
    store.schedule(_treatment(2, "3 days"), date(2024, 3, 1))

    assert len(snapshot) == 1
    assert len(store) == 2
    assert [e.treatment_id for e in store] == ["t-1", "t-2"]


def test_timeline_sorted_by_date():
    store = TreatmentScheduleStore()
    store.schedule(_treatment(1, "10 days"), date(2024, 3, 1))
    store.schedule(_treatment(2, "3 days"), date(2024, 3, 2))

    timeline = store.timeline()
    assert [(e.kind, e.event_date, e.treatment_id) for e in timeline] == [
        (TimelineEventKind.STARTED, date(2024, 3, 1), "t-1"),
        (TimelineEventKind.STARTED, date(2024, 3, 2), "t-2"),
        (TimelineEventKind.NEXT_APPLICATION, date(2024, 3, 5), "t-2"),
        (TimelineEventKind.NEXT_APPLICATION, date(2024, 3, 11), "t-1"),
    ]


def test_next_due():
    store = TreatmentScheduleStore()
    assert store.next_due(date(2024, 3, 1)) is None

    store.schedule(_treatment(1, "10 days"), date(2024, 3, 1))
    soon = store.schedule(_treatment(2, "3 days"), date(2024, 3, 1))

    assert store.next_due(date(2024, 3, 1)) == soon
    assert store.next_due(date(2024, 3, 5)).treatment_id == "t-1"
    assert store.next_due(date(2024, 3, 12)) is None
