"""
Diagnosis session: the single active diagnosis, the captured image and the
in-flight analysis marker.

Every capture bumps ``generation``. Completions and failures carry the
generation they were issued for and are ignored once it has moved on, so a
slow analysis can never overwrite a newer capture.
"""
from typing import Optional

from cropdoctor.models.diagnosis import Diagnosis
from cropdoctor.models.workflow import ImageRef


class DiagnosisSession:

    def __init__(self):
        self.diagnosis: Optional[Diagnosis] = None
        self.image: Optional[ImageRef] = None
        self.analyzing = False
        self.generation = 0
        self.last_error: Optional[str] = None

    def begin_capture(self, image: ImageRef) -> int:
        # The previous diagnosis stays visible until the new one resolves
        self.generation += 1
        self.image = image
        self.analyzing = True
        self.last_error = None
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def complete_analysis(self, generation: int, diagnosis: Diagnosis) -> bool:
        if not (self.analyzing and self.is_current(generation)):
            return False
        self.diagnosis = diagnosis
        self.analyzing = False
        return True

    def fail_analysis(self, generation: int, message: str) -> bool:
        if not (self.analyzing and self.is_current(generation)):
            return False
        self.analyzing = False
        self.last_error = message
        return True

    def cancel(self) -> bool:
        """Abandon the in-flight analysis, if any."""
        if not self.analyzing:
            return False
        self.generation += 1
        self.analyzing = False
        return True

    def reset(self) -> None:
        """Back to capture: drop in-flight work and errors, keep the diagnosis."""
        self.cancel()
        self.last_error = None
