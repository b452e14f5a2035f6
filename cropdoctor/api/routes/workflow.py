from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import PlainTextResponse

from cropdoctor.api.dependencies import get_workflow
from cropdoctor.api.schemas import (
    CompareResponse,
    FieldSizeRequest,
    FieldSizeResponse,
    ModeRequest,
    NavigateRequest,
    ScheduleRequest,
    ShareResponse,
)
from cropdoctor.models.schedule import ScheduledTreatment, TimelineEvent
from cropdoctor.models.workflow import PageView, ProgressPhotos, WorkflowSnapshot
from cropdoctor.services.capture import image_ref_from_upload
from cropdoctor.services.report import build_share_text
from cropdoctor.services.research import ResearchResult
from cropdoctor.services.workflow import WorkflowStateMachine

router = APIRouter(prefix="/workflow", tags=["workflow"])


@router.get("/state", response_model=WorkflowSnapshot)
async def get_state(workflow: WorkflowStateMachine = Depends(get_workflow)):
    return workflow.snapshot()


@router.get("/view", response_model=PageView)
async def get_view(workflow: WorkflowStateMachine = Depends(get_workflow)):
    return workflow.view()


@router.post("/capture", response_model=WorkflowSnapshot, status_code=202)
async def capture(
    image: UploadFile = File(...),
    wait: bool = Query(False, description="Block until the diagnosis resolves"),
    workflow: WorkflowStateMachine = Depends(get_workflow),
):
    """
    Submit a captured image for diagnosis.

    The analysis runs in the background; poll /state (or pass wait=true)
    to see the results phase.
    """
    ref = await image_ref_from_upload(image)
    await workflow.run_capture(ref, wait=wait)
    return workflow.snapshot()


@router.post("/navigate", response_model=PageView)
async def navigate(req: NavigateRequest, workflow: WorkflowStateMachine = Depends(get_workflow)):
    return workflow.navigate(req.page)


@router.post("/mode", response_model=WorkflowSnapshot)
async def set_mode(req: ModeRequest, workflow: WorkflowStateMachine = Depends(get_workflow)):
    workflow.set_mode(req.offline)
    return workflow.snapshot()


@router.post("/field-size", response_model=FieldSizeResponse)
async def set_field_size(req: FieldSizeRequest, workflow: WorkflowStateMachine = Depends(get_workflow)):
    acres = workflow.set_field_size(req.field_size)
    return FieldSizeResponse(field_size=workflow.snapshot().field_size, acres=acres)


@router.post("/compare/{treatment_id}", response_model=CompareResponse)
async def toggle_compare(treatment_id: str, workflow: WorkflowStateMachine = Depends(get_workflow)):
    compared = workflow.toggle_compare(treatment_id)
    return CompareResponse(compared=compared, limit=workflow.compare_limit)


@router.post("/schedule", response_model=ScheduledTreatment, status_code=201)
async def schedule_treatment(req: ScheduleRequest, workflow: WorkflowStateMachine = Depends(get_workflow)):
    return workflow.schedule_treatment(req.treatment_id, req.start_date)


@router.get("/schedule", response_model=List[ScheduledTreatment])
async def list_schedule(workflow: WorkflowStateMachine = Depends(get_workflow)):
    return list(workflow.schedule_store.entries())


@router.get("/timeline", response_model=List[TimelineEvent])
async def timeline(workflow: WorkflowStateMachine = Depends(get_workflow)):
    return workflow.schedule_store.timeline()


@router.post("/progress-photos", response_model=ProgressPhotos)
async def add_progress_photo(
    image: UploadFile = File(...),
    workflow: WorkflowStateMachine = Depends(get_workflow),
):
    ref = await image_ref_from_upload(image)
    return workflow.add_progress_photo(ref)


@router.get("/research", response_model=List[ResearchResult])
async def research(workflow: WorkflowStateMachine = Depends(get_workflow)):
    return workflow.search_external_sources()


@router.get("/report", response_class=PlainTextResponse)
async def report(workflow: WorkflowStateMachine = Depends(get_workflow)):
    text = workflow.report()
    if text is None:
        raise HTTPException(status_code=404, detail="No diagnosis to report")
    return PlainTextResponse(text)


@router.get("/share", response_model=ShareResponse)
async def share(workflow: WorkflowStateMachine = Depends(get_workflow)):
    if workflow.diagnosis is None:
        raise HTTPException(status_code=404, detail="No diagnosis to share")
    return ShareResponse(text=build_share_text(workflow.diagnosis))
