"""
Errors raised by the well guide services.

All of them are client-facing input errors and subclass ValueError, so an
unhandled one still maps to a 400 response through the global handler.
"""

from typing import Optional


class WellGuideError(ValueError):
    """Base class for well guide errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnknownGuide(WellGuideError):
    """Raised when a guide id is not registered in the recurrence catalog."""

    def __init__(self, guide_id: object):
        self.guide_id = guide_id
        super().__init__(f"Unknown well guide: {guide_id}")


class InvalidTimestamp(WellGuideError):
    """Raised when the submitted appointment timestamp or offset cannot be parsed."""

    def __init__(self, message: str, value: Optional[object] = None):
        self.value = value
        super().__init__(message)


class MissingIdentity(WellGuideError):
    """Raised when the request carries no usable patient id."""

    def __init__(self, message: str = "Please complete the onboarding process."):
        super().__init__(message)


class GuideRecordNotFound(WellGuideError):
    """Raised when a patient has no record for the requested guide."""

    def __init__(self, patient_id: int, guide_id: int):
        self.patient_id = patient_id
        self.guide_id = guide_id
        super().__init__(f"No well guide record for patient {patient_id} and guide {guide_id}")
