"""
Diagnosis and treatment models.

Both are immutable once produced: the catalog (or any future inference
backend) creates them, the workflow only references them.
"""
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cropdoctor.services.scheduling import parse_frequency_days


class Severity(str, Enum):
    """Ordered severity: LOW < MEDIUM < HIGH."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


class TreatmentCategory(str, Enum):
    ORGANIC = "Organic"
    CHEMICAL = "Chemical"
    TRADITIONAL = "Traditional"


class Effectiveness(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"

    @classmethod
    def _missing_(cls, value):
        # Accept "VeryHigh", "very_high", "very high"
        if isinstance(value, str):
            key = value.replace(" ", "").replace("_", "").lower()
            for member in cls:
                if member.value.replace(" ", "").lower() == key:
                    return member
        return None

    @property
    def score(self) -> int:
        return EFFECTIVENESS_SCORES[self]


EFFECTIVENESS_SCORES = {
    Effectiveness.LOW: 40,
    Effectiveness.MEDIUM: 60,
    Effectiveness.HIGH: 80,
    Effectiveness.VERY_HIGH: 95,
}


class Treatment(BaseModel):
    """A single remediation option with cost and application metadata."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: TreatmentCategory
    effectiveness: Effectiveness
    cost_per_acre: float = Field(ge=0)
    application: str = ""
    instructions: str = ""
    frequency: str = ""
    frequency_days: int = Field(ge=0)

    @model_validator(mode="before")
    @classmethod
    def _derive_frequency_days(cls, data):
        if not isinstance(data, dict):
            return data
        parsed = parse_frequency_days(data.get("frequency"))
        given = data.get("frequency_days")
        if given is not None and given != parsed:
            raise ValueError(
                f"frequency_days {given} does not match frequency {data.get('frequency')!r} ({parsed} days)"
            )
        return {**data, "frequency_days": parsed}

    @property
    def effectiveness_score(self) -> int:
        return self.effectiveness.score

    @property
    def is_free(self) -> bool:
        return self.cost_per_acre == 0


class Diagnosis(BaseModel):
    """Disease identification result; treatment order is recommendation rank."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    confidence: int = Field(ge=0, le=100)
    severity: Severity
    crop: str
    description: str = ""
    symptoms: Tuple[str, ...] = ()
    treatments: Tuple[Treatment, ...] = ()

    @property
    def top_choice(self) -> Optional[Treatment]:
        return self.treatments[0] if self.treatments else None

    def treatment(self, treatment_id: str) -> Optional[Treatment]:
        for t in self.treatments:
            if t.id == treatment_id:
                return t
        return None
