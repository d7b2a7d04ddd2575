# Package initialization
# Import all models to ensure relationships are properly established
from .well_guide import WellGuide
from .booking import Booking
from .patient_well_guide import PatientWellGuide

__all__ = [
    "WellGuide",
    "Booking",
    "PatientWellGuide",
]
