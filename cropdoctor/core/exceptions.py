"""
Workflow exceptions.
Each carries the HTTP status the API layer answers with.
"""


class WorkflowError(Exception):
    """Base exception for workflow errors"""
    status_code = 400


class CaptureUnavailable(WorkflowError):
    """The captured upload cannot be used as an image"""
    status_code = 400


class DiagnosisFailed(WorkflowError):
    """The diagnose capability failed; the capture may be retried"""
    status_code = 503


class AnalysisSuperseded(WorkflowError):
    """A newer capture or navigation cancelled the analysis being waited on"""
    status_code = 409


class InvalidScheduleInput(WorkflowError):
    """Schedule request rejected; no entry was created"""
    status_code = 422


class InvalidTransition(WorkflowError):
    """Requested phase change is not allowed from the current phase"""
    status_code = 409


class UnknownTreatment(WorkflowError):
    """Treatment id is not part of the active diagnosis"""
    status_code = 404
