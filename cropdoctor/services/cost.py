"""
Cost estimator.

Field size arrives as raw user text. It is parsed like an integer prefix
("3", "12 acres"); empty or malformed input counts as zero acres so the
cost panels always render.
"""
import math
import re
from typing import Iterable, List, Union

from cropdoctor.models.diagnosis import Treatment
from cropdoctor.models.workflow import CostEstimate

CURRENCY = "KES"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

FieldSize = Union[str, int, float, None]


def parse_field_size(field_size: FieldSize) -> int:
    """Parse user-entered acres; invalid -> 0, negative -> 0."""
    if field_size is None or isinstance(field_size, bool):
        return 0
    if isinstance(field_size, (int, float)):
        if not math.isfinite(field_size):
            return 0
        return max(int(field_size), 0)
    match = _LEADING_INT.match(str(field_size))
    if match is None:
        return 0
    return max(int(match.group(1)), 0)


def total_cost(field_size_acres: FieldSize, cost_per_acre: float) -> float:
    """fieldSize x costPerAcre, never negative."""
    acres = parse_field_size(field_size_acres)
    return acres * max(cost_per_acre or 0, 0)


def format_cost(value: float) -> str:
    if float(value).is_integer():
        return f"{CURRENCY} {int(value):,}"
    return f"{CURRENCY} {value:,.2f}"


def estimate_one(treatment: Treatment, field_size: FieldSize) -> CostEstimate:
    acres = parse_field_size(field_size)
    total = total_cost(acres, treatment.cost_per_acre)
    return CostEstimate(
        treatment_id=treatment.id,
        treatment_name=treatment.name,
        cost_per_acre=treatment.cost_per_acre,
        field_size_acres=acres,
        total_cost=total,
        display="Free" if treatment.is_free else format_cost(total),
    )


def estimate(treatments: Iterable[Treatment], field_size: FieldSize) -> List[CostEstimate]:
    """Per-treatment estimates, in the order given."""
    return [estimate_one(t, field_size) for t in treatments]


def aggregate_cost(treatments: Iterable[Treatment], field_size: FieldSize) -> float:
    return sum(e.total_cost for e in estimate(treatments, field_size))
