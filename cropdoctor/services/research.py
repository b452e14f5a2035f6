"""
External research lookup (online mode only). Returns canned sources; a real
implementation would query agricultural databases.
"""
from typing import List

from pydantic import BaseModel, Field

from cropdoctor.models.diagnosis import Diagnosis


class ResearchResult(BaseModel):
    source: str
    title: str
    summary: str
    url: str
    relevance: int = Field(ge=0, le=100)


def search_external_sources(diagnosis: Diagnosis) -> List[ResearchResult]:
    return [
        ResearchResult(
            source="FAO Agricultural Database",
            title=f"{diagnosis.name} Management Guidelines",
            summary="Comprehensive guidelines for integrated pest management including biological "
                    "control methods, chemical interventions, and preventive measures.",
            url="https://fao.org/agriculture/pest-management",
            relevance=98,
        ),
        ResearchResult(
            source="CABI Crop Protection",
            title=f"{diagnosis.name} in {diagnosis.crop}",
            summary="Detailed lifecycle information, economic impact assessment, and region-specific "
                    "treatment recommendations with efficacy data.",
            url="https://cabi.org/crop-protection",
            relevance=95,
        ),
        ResearchResult(
            source="Agricultural Research Journal",
            title="Recent Studies on Resistant Varieties",
            summary="Latest research on disease-resistant crop varieties, genetic markers, and "
                    "breeding programs for sustainable management.",
            url="https://agresearch.org/studies",
            relevance=87,
        ),
        ResearchResult(
            source="Local Extension Services",
            title="Taita Taveta Treatment Protocols",
            summary="Region-specific protocols adapted for local climate conditions, available "
                    "pesticides, and farmer training resources.",
            url="https://extension.ke/protocols",
            relevance=92,
        ),
    ]
