from typing import List, Optional, Union

from pydantic import BaseModel, Field

from cropdoctor.models.workflow import Phase


class NavigateRequest(BaseModel):
    page: Phase


class ModeRequest(BaseModel):
    offline: bool


class FieldSizeRequest(BaseModel):
    # Raw user text; malformed values count as zero acres
    field_size: Optional[Union[str, int, float]] = None


class FieldSizeResponse(BaseModel):
    field_size: str
    acres: int


class CompareResponse(BaseModel):
    compared: List[str]
    limit: int


class ScheduleRequest(BaseModel):
    treatment_id: str = Field(min_length=1)
    start_date: str = Field(description="ISO date, YYYY-MM-DD")


class CatalogEntry(BaseModel):
    id: str
    name: str
    crop: str
    severity: str
    treatments: int


class ShareResponse(BaseModel):
    text: str
