"""
Pytest fixtures for CropDoctor tests.
"""
import asyncio
import os
import tempfile
from datetime import date
from io import BytesIO

import pytest
from fastapi.testclient import TestClient

# Set test environment variables BEFORE importing app
os.environ['CROPDOC_DATA_ROOT'] = tempfile.mkdtemp()
os.environ['CROPDOC_FAST_DELAY_MS'] = '0'
os.environ['CROPDOC_CLOUD_DELAY_MS'] = '0'
os.environ['CROPDOC_OFFLINE_MODE'] = 'true'
os.environ['CROPDOC_MAX_IMAGE_MB'] = '2'
os.environ['CROPDOC_DIAGNOSE_FAILURE_RATE'] = '0'

from cropdoctor.main import app
from cropdoctor.api.dependencies import get_workflow
from cropdoctor.models import Diagnosis, ImageRef
from cropdoctor.services.catalog import TreatmentCatalog
from cropdoctor.services.workflow import WorkflowStateMachine

TODAY = date(2024, 3, 1)


class FixedDiagnoser:
    """Always resolves to the same diagnosis."""

    def __init__(self, diagnosis: Diagnosis):
        self.diagnosis = diagnosis
        self.calls = []

    async def diagnose(self, image, offline):
        self.calls.append((image.filename, offline))
        return self.diagnosis


class FailingDiagnoser:
    async def diagnose(self, image, offline):
        raise RuntimeError("model unavailable")


class GatedDiagnoser:
    """Each image waits on its own gate; results are keyed by filename."""

    def __init__(self, results):
        self.results = results
        self.gates = {}

    def _gate(self, name):
        if name not in self.gates:
            self.gates[name] = asyncio.Event()
        return self.gates[name]

    def release(self, name):
        self._gate(name).set()

    async def diagnose(self, image, offline):
        await self._gate(image.filename).wait()
        return self.results[image.filename]


def make_treatment(i, frequency="7 days", cost=100, **overrides):
    data = {
        "id": f"t-{i}",
        "name": f"Treatment {i}",
        "category": "Organic",
        "effectiveness": "High",
        "cost_per_acre": cost,
        "application": f"Apply every {frequency}",
        "instructions": "Spray in the morning.",
        "frequency": frequency,
    }
    data.update(overrides)
    return data


def make_diagnosis(disease_id="d-1", treatments=None, **overrides) -> Diagnosis:
    data = {
        "id": disease_id,
        "name": f"Disease {disease_id}",
        "confidence": 90,
        "severity": "High",
        "crop": "Maize",
        "description": "Test disease",
        "symptoms": ["Spots", "Holes"],
        "treatments": treatments if treatments is not None else [make_treatment(1), make_treatment(2)],
    }
    data.update(overrides)
    return Diagnosis.model_validate(data)


def make_image(name="leaf.png") -> ImageRef:
    return ImageRef(filename=name, content_type="image/png", size_bytes=10, width=1, height=1)


@pytest.fixture
def catalog():
    """Catalog loaded from the bundled YAML files."""
    return TreatmentCatalog()


@pytest.fixture
def armyworm(catalog):
    return catalog.lookup("faw-001")


@pytest.fixture
def workflow(catalog, armyworm):
    """State machine with a deterministic diagnoser and a fixed clock."""
    return WorkflowStateMachine(
        diagnoser=FixedDiagnoser(armyworm),
        catalog=catalog,
        offline=True,
        clock=lambda: TODAY,
        compare_limit=3,
    )


@pytest.fixture(scope="function")
def client(workflow):
    """FastAPI test client bound to the ``workflow`` fixture."""
    app.dependency_overrides[get_workflow] = lambda: workflow
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_image_bytes():
    """Generate a minimal valid PNG image for testing."""
    from PIL import Image

    img = Image.new('RGB', (100, 100), color='green')
    buf = BytesIO()
    img.save(buf, format='PNG')
    buf.seek(0)
    return buf.read()


@pytest.fixture
def oversized_image_bytes():
    """Generate image larger than MAX_IMAGE_MB for testing."""
    from PIL import Image

    img = Image.new('RGB', (3000, 3000), color='blue')
    buf = BytesIO()
    img.save(buf, format='PNG', compress_level=0)
    buf.seek(0)
    return buf.read()
