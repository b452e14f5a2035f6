from typing import List

from fastapi import APIRouter, Depends, HTTPException

from cropdoctor.api.dependencies import get_catalog
from cropdoctor.api.schemas import CatalogEntry
from cropdoctor.models.diagnosis import Diagnosis
from cropdoctor.services.catalog import TreatmentCatalog

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("", response_model=List[CatalogEntry])
async def list_catalog(catalog: TreatmentCatalog = Depends(get_catalog)):
    return [
        CatalogEntry(
            id=d.id,
            name=d.name,
            crop=d.crop,
            severity=d.severity.value,
            treatments=len(d.treatments),
        )
        for d in catalog.all()
    ]


@router.get("/{disease_id}", response_model=Diagnosis)
async def get_disease(disease_id: str, catalog: TreatmentCatalog = Depends(get_catalog)):
    diagnosis = catalog.lookup(disease_id)
    if diagnosis is None:
        raise HTTPException(status_code=404, detail=f"Disease {disease_id} not found")
    return diagnosis
