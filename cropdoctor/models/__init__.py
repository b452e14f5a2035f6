from cropdoctor.models.diagnosis import (
    Diagnosis,
    Effectiveness,
    Severity,
    Treatment,
    TreatmentCategory,
)
from cropdoctor.models.schedule import ScheduledTreatment, TimelineEvent, TimelineEventKind
from cropdoctor.models.workflow import (
    CostEstimate,
    ImageRef,
    PageView,
    Phase,
    ProgressPhotos,
    TreatmentRow,
    WorkflowSnapshot,
)

__all__ = [
    "Diagnosis",
    "Effectiveness",
    "Severity",
    "Treatment",
    "TreatmentCategory",
    "ScheduledTreatment",
    "TimelineEvent",
    "TimelineEventKind",
    "CostEstimate",
    "ImageRef",
    "PageView",
    "Phase",
    "ProgressPhotos",
    "TreatmentRow",
    "WorkflowSnapshot",
]
