"""
Process-wide workflow instance shared by all routes.
"""
from functools import lru_cache

from cropdoctor.services.catalog import TreatmentCatalog
from cropdoctor.services.workflow import WorkflowStateMachine


@lru_cache(maxsize=1)
def get_catalog() -> TreatmentCatalog:
    return TreatmentCatalog()


@lru_cache(maxsize=1)
def get_workflow() -> WorkflowStateMachine:
    return WorkflowStateMachine(catalog=get_catalog())
