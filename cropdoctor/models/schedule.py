"""
Scheduled treatment and monitoring timeline models.
"""
from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict


class ScheduledTreatment(BaseModel):
    """
    A confirmed commitment to apply a treatment from ``start_date``.

    Name and frequency are snapshots taken at scheduling time, not live
    references into the catalog.
    """

    model_config = ConfigDict(frozen=True)

    treatment_id: str
    treatment_name: str
    start_date: date
    frequency: str
    next_application_date: date


class TimelineEventKind(str, Enum):
    STARTED = "started"
    NEXT_APPLICATION = "next_application"


class TimelineEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: TimelineEventKind
    event_date: date
    treatment_id: str
    treatment_name: str
