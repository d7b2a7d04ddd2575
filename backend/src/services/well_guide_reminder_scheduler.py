"""
Reminder scheduling for well guides.

Computes when the next reminder should fire after a patient enables
reminders, and the next routine visit shown to the patient.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

from core.constants import DUE_IN_ONE_MONTH_FOLLOW_UP_DAYS, DUE_FOR_A_VISIT_FOLLOW_UP_DAYS
from services.well_guide_status_engine import WellGuideStatus
from utils.datetime_utils import add_months, ensure_utc, month_name, utc_today

logger = logging.getLogger(__name__)

_FOLLOW_UP_DAYS = {
    WellGuideStatus.DUE_IN_ONE_MONTH: DUE_IN_ONE_MONTH_FOLLOW_UP_DAYS,
    WellGuideStatus.DUE_FOR_A_VISIT: DUE_FOR_A_VISIT_FOLLOW_UP_DAYS,
}


class WellGuideReminderScheduler:
    """Cadence rules for well guide reminders."""

    @staticmethod
    def next_reminder_date(
        status: Union[WellGuideStatus, str],
        today: Optional[date] = None
    ) -> Optional[date]:
        """
        Get the next reminder date for the enable-reminder action.

        dueInOneMonth follows up in 7 days and dueForAVisit in 14 days.
        Scheduled and up-to-date records have no follow-up; None means
        the caller should leave next_reminder as it is.
        """
        try:
            status = WellGuideStatus(status)
        except ValueError:
            logger.warning(f"Unknown well guide status {status!r}, no reminder scheduled")
            return None

        days = _FOLLOW_UP_DAYS.get(status)
        if days is None:
            return None
        return (today or utc_today()) + timedelta(days=days)

    @staticmethod
    def next_routine_date(last_appointment_date: datetime, recurrence_months: int) -> datetime:
        """Date of the next required visit: last appointment plus the recurrence period."""
        return add_months(ensure_utc(last_appointment_date), recurrence_months)

    @classmethod
    def next_routine_display(cls, last_appointment_date: datetime, recurrence_months: int) -> Tuple[str, int]:
        """Next routine visit as (month name, year), e.g. ("October", 2027)."""
        next_routine = cls.next_routine_date(last_appointment_date, recurrence_months)
        return month_name(next_routine), next_routine.year
