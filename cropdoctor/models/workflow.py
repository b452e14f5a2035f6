"""
Workflow phase, image handle and read-only view models.

Views are snapshots handed to presentation code; mutating them never
touches workflow state.
"""
import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from cropdoctor.models.diagnosis import Diagnosis, Treatment
from cropdoctor.models.schedule import ScheduledTreatment, TimelineEvent


class Phase(str, Enum):
    CAPTURE = "capture"
    ANALYZING = "analyzing"
    RESULTS = "results"
    TREATMENTS = "treatments"
    MONITOR = "monitor"


PAGE_TITLES = {
    Phase.CAPTURE: "Scan Crop",
    Phase.ANALYZING: "Analyzing Image",
    Phase.RESULTS: "Diagnosis",
    Phase.TREATMENTS: "Treatments",
    Phase.MONITOR: "Monitor",
}


class ImageRef(BaseModel):
    """Opaque handle to a captured image; the bytes stay with the capture layer."""

    model_config = ConfigDict(frozen=True)

    ref_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    filename: str
    content_type: str
    size_bytes: int = Field(ge=0)
    width: Optional[int] = None
    height: Optional[int] = None
    captured_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CostEstimate(BaseModel):
    treatment_id: str
    treatment_name: str
    cost_per_acre: float
    field_size_acres: int
    total_cost: float
    display: str


class TreatmentRow(BaseModel):
    rank: int
    top_choice: bool
    treatment: Treatment
    effectiveness_score: int
    estimate: CostEstimate
    compared: bool = False


class ProgressPhotos(BaseModel):
    count: int = 0
    first: Optional[ImageRef] = None
    latest: Optional[ImageRef] = None


class PageView(BaseModel):
    page: Phase
    title: str
    offline: bool
    empty: bool = False
    message: Optional[str] = None
    status_message: Optional[str] = None
    diagnosis: Optional[Diagnosis] = None
    image: Optional[ImageRef] = None
    treatments: List[TreatmentRow] = Field(default_factory=list)
    comparison: List[CostEstimate] = Field(default_factory=list)
    field_size: str = ""
    schedule: List[ScheduledTreatment] = Field(default_factory=list)
    timeline: List[TimelineEvent] = Field(default_factory=list)
    next_due: Optional[ScheduledTreatment] = None
    progress: ProgressPhotos = Field(default_factory=ProgressPhotos)


class WorkflowSnapshot(BaseModel):
    phase: Phase
    generation: int
    analyzing: bool
    offline: bool
    diagnosis_id: Optional[str] = None
    image: Optional[ImageRef] = None
    last_error: Optional[str] = None
    field_size: str = ""
    compared: List[str] = Field(default_factory=list)
    schedule: List[ScheduledTreatment] = Field(default_factory=list)
    progress_photos: int = 0
    today: date
