"""
Diagnose capability.

The workflow only depends on the ``Diagnoser`` protocol. The bundled
implementation simulates inference: it waits for the latency of the
selected processing profile and picks a catalog entry at random.
"""
import asyncio
import logging
import random
from typing import Optional, Protocol, Tuple

from cropdoctor.core.config import settings
from cropdoctor.models.diagnosis import Diagnosis
from cropdoctor.models.workflow import ImageRef
from cropdoctor.services.catalog import TreatmentCatalog

logger = logging.getLogger(__name__)

FAST_PROFILE = "fast-processing"
CLOUD_PROFILE = "cloud-processing"


class Diagnoser(Protocol):
    async def diagnose(self, image: ImageRef, offline: bool) -> Diagnosis:
        ...


def latency_profile(offline: bool) -> Tuple[str, int]:
    """Return (profile name, delay in ms) for the mode flag."""
    if offline:
        return FAST_PROFILE, settings.FAST_DELAY_MS
    return CLOUD_PROFILE, settings.CLOUD_DELAY_MS


class SimulatedDiagnoser:
    """
    Stand-in for a real classifier.

    Usage:
        diagnoser = SimulatedDiagnoser(catalog)
        diagnosis = await diagnoser.diagnose(image, offline=True)
    """

    def __init__(
        self,
        catalog: Optional[TreatmentCatalog] = None,
        rng: Optional[random.Random] = None,
        failure_rate: Optional[float] = None,
    ):
        self.catalog = catalog or TreatmentCatalog()
        self.rng = rng or random.Random()
        self.failure_rate = settings.DIAGNOSE_FAILURE_RATE if failure_rate is None else failure_rate

    async def diagnose(self, image: ImageRef, offline: bool) -> Diagnosis:
        profile, delay_ms = latency_profile(offline)
        logger.info(f"Diagnosing {image.filename} via {profile} ({delay_ms}ms)")

        await asyncio.sleep(delay_ms / 1000.0)

        if self.failure_rate and self.rng.random() < self.failure_rate:
            raise RuntimeError("Simulated diagnosis failure")

        candidates = self.catalog.all()
        if not candidates:
            raise RuntimeError("Treatment catalog is empty")
        return self.rng.choice(candidates)
