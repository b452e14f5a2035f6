"""
End-to-end workflow tests.
"""
import asyncio
from datetime import date
from io import BytesIO

import pytest

from cropdoctor.models import Phase
from cropdoctor.services.catalog import TreatmentCatalog
from cropdoctor.services.diagnoser import SimulatedDiagnoser
from cropdoctor.services.workflow import WorkflowStateMachine
from conftest import TODAY, FixedDiagnoser, make_diagnosis, make_image, make_treatment


@pytest.mark.integration
def test_capture_diagnose_schedule_monitor():
    """capture -> diagnosis with 3 treatments -> schedule top choice -> monitor."""
    diagnosis = make_diagnosis(
        "faw-test",
        treatments=[
            make_treatment(1, frequency="Apply every 7 days"),
            make_treatment(2, frequency="10 days"),
            make_treatment(3, frequency="3 days"),
        ],
    )
    workflow = WorkflowStateMachine(
        diagnoser=FixedDiagnoser(diagnosis),
        catalog=TreatmentCatalog([diagnosis]),
        clock=lambda: TODAY,
    )

    asyncio.run(workflow.run_capture(make_image(), wait=True))
    assert workflow.phase is Phase.RESULTS

    view = workflow.navigate(Phase.TREATMENTS)
    assert len(view.treatments) == 3
    top = view.treatments[0].treatment

    entry = workflow.schedule_treatment(top, date(2024, 3, 1))
    assert entry.next_application_date == date(2024, 3, 8)

    monitor = workflow.navigate(Phase.MONITOR)
    assert [e.next_application_date for e in monitor.schedule] == [date(2024, 3, 8)]
    assert monitor.next_due == entry


@pytest.mark.integration
def test_simulated_diagnoser_picks_from_catalog(catalog):
    import random

    workflow = WorkflowStateMachine(
        diagnoser=SimulatedDiagnoser(catalog, rng=random.Random(7), failure_rate=0.0),
        catalog=catalog,
        clock=lambda: TODAY,
    )
    asyncio.run(workflow.run_capture(make_image(), wait=True))

    assert workflow.diagnosis.id in catalog.ids()
    assert workflow.phase is Phase.RESULTS


@pytest.mark.integration
def test_full_api_workflow(client, sample_image_bytes):
    """Capture, browse, schedule and monitor over HTTP."""
    response = client.post(
        "/v1/workflow/capture?wait=true",
        files={"image": ("maize.png", BytesIO(sample_image_bytes), "image/png")},
    )
    assert response.status_code == 202
    assert response.json()["phase"] == "results"

    results = client.post("/v1/workflow/navigate", json={"page": "results"}).json()
    assert results["diagnosis"]["name"] == "Fall Armyworm"

    treatments = client.post("/v1/workflow/navigate", json={"page": "treatments"}).json()
    top_id = treatments["treatments"][0]["treatment"]["id"]

    scheduled = client.post(
        "/v1/workflow/schedule",
        json={"treatment_id": top_id, "start_date": "2024-03-01"},
    ).json()
    assert scheduled["next_application_date"] == "2024-03-08"

    # Scheduling the same treatment again is additive
    client.post("/v1/workflow/schedule", json={"treatment_id": top_id, "start_date": "2024-03-02"})

    monitor = client.post("/v1/workflow/navigate", json={"page": "monitor"}).json()
    assert [s["next_application_date"] for s in monitor["schedule"]] == ["2024-03-08", "2024-03-09"]
    assert monitor["next_due"]["next_application_date"] == "2024-03-08"

    # Retake keeps the monitor usable
    client.post("/v1/workflow/navigate", json={"page": "capture"})
    monitor = client.post("/v1/workflow/navigate", json={"page": "monitor"}).json()
    assert monitor["empty"] is False
    assert len(monitor["schedule"]) == 2
