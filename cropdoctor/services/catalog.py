"""
Treatment catalog.

Read-only reference data: one YAML file per disease under CATALOG_DIR,
validated into Diagnosis models at load time.
"""
import glob
import logging
import os
from typing import Dict, List, Optional

import yaml

from cropdoctor.core.config import settings
from cropdoctor.models.diagnosis import Diagnosis, Treatment

logger = logging.getLogger(__name__)


def _load_cards(catalog_dir: str) -> List[Diagnosis]:
    cards = []
    for path in sorted(glob.glob(os.path.join(catalog_dir, "*.yaml"))):
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        data.setdefault("id", os.path.basename(path).replace(".yaml", ""))
        cards.append(Diagnosis.model_validate(data))
    return cards


class TreatmentCatalog:
    """
    Lookup of diseases and their ranked treatments by identifier.

    Usage:
        catalog = TreatmentCatalog()
        diagnosis = catalog.lookup("faw-001")
    """

    def __init__(self, diagnoses: Optional[List[Diagnosis]] = None, catalog_dir: Optional[str] = None):
        if diagnoses is None:
            catalog_dir = catalog_dir or settings.CATALOG_DIR
            diagnoses = _load_cards(catalog_dir)
            logger.info(f"Loaded {len(diagnoses)} catalog entries from {catalog_dir}")
        self._by_id: Dict[str, Diagnosis] = {d.id: d for d in diagnoses}

    def __len__(self) -> int:
        return len(self._by_id)

    def lookup(self, disease_id: str) -> Optional[Diagnosis]:
        return self._by_id.get(disease_id)

    def all(self) -> List[Diagnosis]:
        return list(self._by_id.values())

    def ids(self) -> List[str]:
        return list(self._by_id.keys())

    def find_treatment(self, disease_id: str, treatment_id: str) -> Optional[Treatment]:
        diagnosis = self.lookup(disease_id)
        return diagnosis.treatment(treatment_id) if diagnosis else None
