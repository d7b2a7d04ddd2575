"""
Services package for well guide business logic.

This package contains the status engine, the reminder cadence rules and the
service classes shared by the API endpoints and the daily refresh job.
"""

from .recurrence_catalog import RecurrenceCatalog
from .well_guide_service import WellGuideService
from .well_guide_reminder_scheduler import WellGuideReminderScheduler

__all__ = [
    "RecurrenceCatalog",
    "WellGuideService",
    "WellGuideReminderScheduler",
]
