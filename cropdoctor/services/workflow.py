"""
Workflow State Machine - top-level controller for the triage workflow.

Phases:
    capture -> analyzing -> results -> treatments <-> monitor
    results/treatments/monitor -> capture (retake / direct navigation)

``analyzing`` is only entered through ``capture()`` and only left when the
analysis for the current generation completes, fails or is cancelled.
Presentation code reads ``PageView`` / ``WorkflowSnapshot`` objects and
changes state exclusively through the command methods below.
"""
import asyncio
import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Tuple, Union

from cropdoctor.core.config import settings
from cropdoctor.core.exceptions import (
    AnalysisSuperseded,
    DiagnosisFailed,
    InvalidScheduleInput,
    InvalidTransition,
    UnknownTreatment,
)
from cropdoctor.models.diagnosis import Diagnosis, Treatment
from cropdoctor.models.schedule import ScheduledTreatment
from cropdoctor.models.workflow import (
    PAGE_TITLES,
    ImageRef,
    PageView,
    Phase,
    ProgressPhotos,
    TreatmentRow,
    WorkflowSnapshot,
)
from cropdoctor.services import cost
from cropdoctor.services.catalog import TreatmentCatalog
from cropdoctor.services.diagnoser import Diagnoser, SimulatedDiagnoser
from cropdoctor.services.report import build_report
from cropdoctor.services.research import ResearchResult, search_external_sources
from cropdoctor.services.schedule_store import TreatmentScheduleStore
from cropdoctor.services.session import DiagnosisSession

logger = logging.getLogger(__name__)

CAPTURE_PHASES = (Phase.CAPTURE, Phase.ANALYZING)
DEFAULT_FIELD_SIZE = "1"

EMPTY_MESSAGES = {
    Phase.RESULTS: ("No Diagnosis Yet", "Scan a plant to see results"),
    Phase.TREATMENTS: ("No Diagnosis Available", "Scan a plant first to see treatments"),
    Phase.MONITOR: ("No Active Treatment", "Scan a plant to start monitoring"),
}


def mode_message(offline: bool, phase: Phase) -> str:
    if phase == Phase.ANALYZING:
        return "Local AI processing..." if offline else "Cloud AI processing..."
    if phase == Phase.MONITOR:
        return "Offline mode - Photos stored locally" if offline else "Online mode - Photos synced to cloud"
    return "Offline mode - Local AI" if offline else "Online mode - Cloud AI"


def parse_start_date(value: Union[str, date, datetime, None]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise InvalidScheduleInput("Start date is required")
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidScheduleInput(f"Invalid start date: {value!r}. Use YYYY-MM-DD")


class WorkflowStateMachine:
    """
    Owns the diagnosis session, the schedule store and the current phase.

    Usage:
        workflow = WorkflowStateMachine()
        await workflow.run_capture(image, wait=True)
        view = workflow.navigate(Phase.TREATMENTS)
        entry = workflow.schedule_treatment(view.treatments[0].treatment, "2024-03-01")
    """

    def __init__(
        self,
        diagnoser: Optional[Diagnoser] = None,
        catalog: Optional[TreatmentCatalog] = None,
        offline: Optional[bool] = None,
        clock: Optional[Callable[[], date]] = None,
        compare_limit: Optional[int] = None,
    ):
        """
        Args:
            diagnoser: Diagnose capability (simulated over the catalog if None)
            catalog: Treatment catalog (loaded from CATALOG_DIR if None)
            offline: Initial mode flag (OFFLINE_MODE if None)
            clock: Returns "today"; used to reject past start dates
            compare_limit: Max treatments in the comparison table
        """
        self.catalog = catalog or TreatmentCatalog()
        self.diagnoser = diagnoser or SimulatedDiagnoser(self.catalog)
        self.session = DiagnosisSession()
        self.schedule_store = TreatmentScheduleStore()
        self.offline = settings.OFFLINE_MODE if offline is None else offline
        self.clock = clock or date.today
        self.compare_limit = settings.COMPARE_LIMIT if compare_limit is None else compare_limit

        self._phase = Phase.CAPTURE
        self._field_size = DEFAULT_FIELD_SIZE
        self._compared: List[str] = []
        self._progress_photos: List[ImageRef] = []
        self._research: List[ResearchResult] = []
        self._inflight: Optional[asyncio.Task] = None

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def diagnosis(self) -> Optional[Diagnosis]:
        return self.session.diagnosis

    def _transition(self, phase: Phase) -> None:
        if phase != self._phase:
            logger.info(f"Phase {self._phase.value} -> {phase.value}")
        self._phase = phase

    # ─────────────────────────────────────────────────────
    # Capture / analysis
    # ─────────────────────────────────────────────────────

    def capture(self, image: ImageRef) -> int:
        """Start a new analysis generation and enter ``analyzing``."""
        if self._phase not in CAPTURE_PHASES:
            raise InvalidTransition(
                f"Cannot capture from {self._phase.value}; navigate to capture first"
            )
        if self.session.analyzing:
            logger.info(f"Capture supersedes in-flight generation {self.session.generation}")

        generation = self.session.begin_capture(image)
        self._transition(Phase.ANALYZING)
        return generation

    def on_diagnosis_ready(self, generation: int, diagnosis: Diagnosis) -> bool:
        """Apply a finished analysis. Returns False for stale generations."""
        if not self.session.complete_analysis(generation, diagnosis):
            logger.info(f"Discarding stale diagnosis for generation {generation}")
            return False

        self._compared = []
        self._research = []
        self._transition(Phase.RESULTS)
        logger.info(f"Diagnosis {diagnosis.id} ready (confidence {diagnosis.confidence}%)")
        return True

    def on_diagnosis_failed(self, generation: int, error: BaseException) -> bool:
        """Leave ``analyzing`` for ``capture`` after a failed analysis."""
        if not self.session.fail_analysis(generation, str(error) or error.__class__.__name__):
            logger.info(f"Discarding stale failure for generation {generation}")
            return False

        logger.warning(f"Diagnosis failed for generation {generation}: {error}", exc_info=error)
        self._transition(Phase.CAPTURE)
        return True

    def cancel_analysis(self) -> bool:
        cancelled = self.session.cancel()
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None
        if cancelled:
            logger.info(f"Cancelled in-flight analysis (now generation {self.session.generation})")
        return cancelled

    async def _analyze(self, generation: int, image: ImageRef) -> Tuple[bool, Optional[Exception]]:
        try:
            diagnosis = await self.diagnoser.diagnose(image, offline=self.offline)
        except asyncio.CancelledError:
            logger.info(f"Analysis for generation {generation} cancelled")
            raise
        except Exception as e:
            return self.on_diagnosis_failed(generation, e), e

        return self.on_diagnosis_ready(generation, diagnosis), None

    def _clear_inflight(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None

    async def run_capture(self, image: ImageRef, wait: bool = False) -> int:
        """
        Capture and run the diagnose capability as a background task.

        Args:
            image: Captured image handle
            wait: Await the analysis instead of returning immediately

        Returns:
            Generation issued for this capture

        Raises:
            DiagnosisFailed: (wait only) the capability raised; phase is capture again
            AnalysisSuperseded: (wait only) a newer capture or navigation won
        """
        previous = self._inflight
        generation = self.capture(image)

        if previous is not None and not previous.done():
            previous.cancel()

        task = asyncio.get_running_loop().create_task(self._analyze(generation, image))
        task.add_done_callback(self._clear_inflight)
        self._inflight = task

        if not wait:
            return generation

        await asyncio.wait({task})
        if task.cancelled():
            raise AnalysisSuperseded(f"Analysis {generation} was cancelled")

        accepted, error = task.result()
        if not accepted:
            raise AnalysisSuperseded(f"Analysis {generation} was superseded")
        if error is not None:
            raise DiagnosisFailed(f"Diagnosis failed: {self.session.last_error}. Please try again.")
        return generation

    # ─────────────────────────────────────────────────────
    # Navigation
    # ─────────────────────────────────────────────────────

    def navigate(self, page: Union[Phase, str]) -> PageView:
        """
        Change page. Pages without an active diagnosis still open and render
        an empty placeholder view.
        """
        try:
            page = Phase(page)
        except ValueError:
            raise InvalidTransition(f"Unknown page: {page}")

        if page == Phase.ANALYZING:
            raise InvalidTransition("Analyzing can only be entered by capturing an image")

        if self._phase == Phase.ANALYZING:
            self.cancel_analysis()
        if page == Phase.CAPTURE:
            self.session.reset()

        self._transition(page)
        return self.view()

    # ─────────────────────────────────────────────────────
    # Treatments / costs / scheduling
    # ─────────────────────────────────────────────────────

    def set_mode(self, offline: bool) -> bool:
        self.offline = bool(offline)
        logger.info(f"Mode set to {'offline' if self.offline else 'online'}")
        return self.offline

    def toggle_mode(self) -> bool:
        return self.set_mode(not self.offline)

    def set_field_size(self, field_size) -> int:
        if field_size is None:
            field_size = ""
        elif isinstance(field_size, (int, float)) and not isinstance(field_size, bool):
            # str(1e20) would reparse as "1"
            field_size = cost.parse_field_size(field_size)
        self._field_size = str(field_size)
        return cost.parse_field_size(self._field_size)

    def _require_treatment(self, treatment_id: str) -> Treatment:
        treatment = self.diagnosis.treatment(treatment_id) if self.diagnosis else None
        if treatment is None:
            raise UnknownTreatment(f"Treatment {treatment_id} not found in active diagnosis")
        return treatment

    def toggle_compare(self, treatment_id: str) -> List[str]:
        """Add/remove a treatment from the comparison; full selections ignore additions."""
        self._require_treatment(treatment_id)
        if treatment_id in self._compared:
            self._compared.remove(treatment_id)
        elif len(self._compared) < self.compare_limit:
            self._compared.append(treatment_id)
        return list(self._compared)

    def schedule_treatment(self, treatment: Union[Treatment, str], start_date) -> ScheduledTreatment:
        """
        Schedule a treatment starting on ``start_date``.

        Args:
            treatment: Treatment, or the id of one in the active diagnosis
            start_date: date or ISO string; must not be in the past

        Raises:
            InvalidScheduleInput: nothing is stored
        """
        if isinstance(treatment, str):
            if self.diagnosis is None:
                raise InvalidScheduleInput("No active diagnosis to schedule from")
            found = self.diagnosis.treatment(treatment)
            if found is None:
                raise InvalidScheduleInput(f"Unknown treatment: {treatment}")
            treatment = found

        start = parse_start_date(start_date)
        today = self.clock()
        if start < today:
            logger.info(f"Rejected schedule for {treatment.id}: {start} is before {today}")
            raise InvalidScheduleInput(f"Start date {start.isoformat()} is in the past")

        entry = self.schedule_store.schedule(treatment, start)
        logger.info(
            f"Scheduled {entry.treatment_name} from {entry.start_date}, "
            f"next application {entry.next_application_date}"
        )
        return entry

    # ─────────────────────────────────────────────────────
    # Monitor extras
    # ─────────────────────────────────────────────────────

    def add_progress_photo(self, image: ImageRef) -> ProgressPhotos:
        self._progress_photos.append(image)
        return self._progress()

    def _progress(self) -> ProgressPhotos:
        photos = self._progress_photos
        return ProgressPhotos(
            count=len(photos),
            first=photos[0] if photos else None,
            latest=photos[-1] if photos else None,
        )

    def search_external_sources(self) -> List[ResearchResult]:
        if self.offline:
            raise InvalidTransition("External search is only available in online mode")
        if self.diagnosis is None:
            return []
        self._research = search_external_sources(self.diagnosis)
        return list(self._research)

    def report(self) -> Optional[str]:
        if self.diagnosis is None:
            return None
        return build_report(self.diagnosis, self.offline, self._research)

    # ─────────────────────────────────────────────────────
    # Read-only views
    # ─────────────────────────────────────────────────────

    def _treatment_rows(self) -> List[TreatmentRow]:
        rows = []
        for index, t in enumerate(self.diagnosis.treatments):
            rows.append(TreatmentRow(
                rank=index + 1,
                top_choice=index == 0,
                treatment=t,
                effectiveness_score=t.effectiveness_score,
                estimate=cost.estimate_one(t, self._field_size),
                compared=t.id in self._compared,
            ))
        return rows

    def view(self) -> PageView:
        phase = self._phase
        view = PageView(
            page=phase,
            title=PAGE_TITLES[phase],
            offline=self.offline,
            status_message=mode_message(self.offline, phase),
            image=self.session.image,
            field_size=self._field_size,
        )

        if phase in (Phase.CAPTURE, Phase.ANALYZING):
            view.message = self.session.last_error
            return view

        if self.diagnosis is None:
            title, message = EMPTY_MESSAGES[phase]
            view.empty = True
            view.title = title
            view.message = message
            return view

        view.diagnosis = self.diagnosis
        if phase == Phase.TREATMENTS:
            view.treatments = self._treatment_rows()
            compared = [self.diagnosis.treatment(tid) for tid in self._compared]
            view.comparison = cost.estimate([t for t in compared if t], self._field_size)
        elif phase == Phase.MONITOR:
            view.schedule = list(self.schedule_store.entries())
            view.timeline = self.schedule_store.timeline()
            view.next_due = self.schedule_store.next_due(self.clock())
            view.progress = self._progress()
        return view

    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(
            phase=self._phase,
            generation=self.session.generation,
            analyzing=self.session.analyzing,
            offline=self.offline,
            diagnosis_id=self.diagnosis.id if self.diagnosis else None,
            image=self.session.image,
            last_error=self.session.last_error,
            field_size=self._field_size,
            compared=list(self._compared),
            schedule=list(self.schedule_store.entries()),
            progress_photos=len(self._progress_photos),
            today=self.clock(),
        )
