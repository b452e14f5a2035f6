"""
Append-only store of scheduled treatments and the monitoring timeline
derived from it.
"""
import logging
from datetime import date
from typing import Iterator, List, Optional, Tuple

from cropdoctor.models.diagnosis import Treatment
from cropdoctor.models.schedule import ScheduledTreatment, TimelineEvent, TimelineEventKind
from cropdoctor.services.scheduling import add_days

logger = logging.getLogger(__name__)


class TreatmentScheduleStore:
    """
    Insertion order is scheduling order. Entries are never mutated or
    removed; scheduling the same treatment twice yields two entries.
    """

    def __init__(self):
        self._entries: List[ScheduledTreatment] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ScheduledTreatment]:
        return iter(self.entries())

    def schedule(self, treatment: Treatment, start_date: date) -> ScheduledTreatment:
        entry = ScheduledTreatment(
            treatment_id=treatment.id,
            treatment_name=treatment.name,
            start_date=start_date,
            frequency=treatment.frequency,
            next_application_date=add_days(start_date, treatment.frequency_days),
        )
        self._entries.append(entry)
        logger.debug(f"Scheduled {treatment.id} (#{len(self._entries)})")
        return entry

    def entries(self) -> Tuple[ScheduledTreatment, ...]:
        return tuple(self._entries)

    def timeline(self) -> List[TimelineEvent]:
        """Start and next-application events ordered by date; ties keep scheduling order."""
        events = []
        for entry in self._entries:
            events.append(TimelineEvent(
                kind=TimelineEventKind.STARTED,
                event_date=entry.start_date,
                treatment_id=entry.treatment_id,
                treatment_name=entry.treatment_name,
            ))
            events.append(TimelineEvent(
                kind=TimelineEventKind.NEXT_APPLICATION,
                event_date=entry.next_application_date,
                treatment_id=entry.treatment_id,
                treatment_name=entry.treatment_name,
            ))
        return sorted(events, key=lambda e: e.event_date)

    def next_due(self, today: date) -> Optional[ScheduledTreatment]:
        upcoming = [e for e in self._entries if e.next_application_date >= today]
        if not upcoming:
            return None
        return min(upcoming, key=lambda e: e.next_application_date)
