"""
Well guide status engine.

Derives a patient's status for a well guide from the last appointment date
and the guide's recurrence period, and keeps the one-shot reminder
bookkeeping for the current recurrence cycle.

Elapsed time is measured in continuous months (wall-clock time divided by
the average month length) instead of calendar-field differences, because
recurrence periods are expressed in months of varying length.

Classification is an ordered list of (predicate, status) rules evaluated top
down; the first match wins:

    m < 0          -> scheduled
    D-1 <= m < D   -> dueInOneMonth
    m == 0         -> dueForAVisit
    m > D          -> dueForAVisit
    m < D-1        -> uptodate
    otherwise      -> dueForAVisit   (only m == D reaches this)

where ``m`` is months elapsed and ``D`` the recurrence period.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Callable, List, Optional, Tuple

from core.constants import (
    WELL_GUIDE_STATUS_SCHEDULED,
    WELL_GUIDE_STATUS_UP_TO_DATE,
    WELL_GUIDE_STATUS_DUE_IN_ONE_MONTH,
    WELL_GUIDE_STATUS_DUE_FOR_A_VISIT,
)
from utils.datetime_utils import ensure_utc, fractional_months_between, utc_now

logger = logging.getLogger(__name__)


class WellGuideStatus(str, Enum):
    """Status of a patient for a well guide."""
    SCHEDULED = WELL_GUIDE_STATUS_SCHEDULED
    UP_TO_DATE = WELL_GUIDE_STATUS_UP_TO_DATE
    DUE_IN_ONE_MONTH = WELL_GUIDE_STATUS_DUE_IN_ONE_MONTH
    DUE_FOR_A_VISIT = WELL_GUIDE_STATUS_DUE_FOR_A_VISIT


@dataclass(frozen=True)
class GuideStatusInput:
    """State of a patient well guide record consumed by the engine."""
    last_appointment_date: datetime
    recurrence_months: int
    due_in_one_month_reminder_sent: bool = False
    due_for_visit_reminder_sent: bool = False
    next_reminder: Optional[date] = None


@dataclass(frozen=True)
class GuideStatusResult:
    """Engine output: the input state plus the derived status."""
    last_appointment_date: datetime
    recurrence_months: int
    status: WellGuideStatus
    due_in_one_month_reminder_sent: bool
    due_for_visit_reminder_sent: bool
    next_reminder: Optional[date]
    months_elapsed: float


_Predicate = Callable[[float, int], bool]

STATUS_RULES: List[Tuple[_Predicate, WellGuideStatus]] = [
    (lambda m, d: m < 0, WellGuideStatus.SCHEDULED),
    (lambda m, d: d - 1 <= m < d, WellGuideStatus.DUE_IN_ONE_MONTH),
    (lambda m, d: m == 0, WellGuideStatus.DUE_FOR_A_VISIT),
    (lambda m, d: m > d, WellGuideStatus.DUE_FOR_A_VISIT),
    (lambda m, d: m < d - 1, WellGuideStatus.UP_TO_DATE),
]

DEFAULT_STATUS = WellGuideStatus.DUE_FOR_A_VISIT


def classify(months_elapsed: float, recurrence_months: int) -> WellGuideStatus:
    """Map elapsed months to a status using STATUS_RULES."""
    for predicate, status in STATUS_RULES:
        if predicate(months_elapsed, recurrence_months):
            return status
    return DEFAULT_STATUS


def compute_status(record: GuideStatusInput, as_of: Optional[datetime] = None) -> GuideStatusResult:
    """
    Compute the status and reminder bookkeeping for a record.

    Entering dueInOneMonth or dueForAVisit with the matching reminder-sent
    flag unset sets the flag and schedules the reminder for ``as_of``'s date.
    With the flag already set, ``next_reminder`` is carried over unchanged.

    Args:
        record: Current record state
        as_of: Evaluation instant, defaults to now (UTC)

    Returns:
        New result; ``record`` is not modified
    """
    as_of = ensure_utc(as_of) if as_of is not None else utc_now()
    months_elapsed = fractional_months_between(as_of, record.last_appointment_date)
    status = classify(months_elapsed, record.recurrence_months)

    due_in_one_month_sent = record.due_in_one_month_reminder_sent
    due_for_visit_sent = record.due_for_visit_reminder_sent
    next_reminder = record.next_reminder

    if status == WellGuideStatus.DUE_IN_ONE_MONTH and not due_in_one_month_sent:
        due_in_one_month_sent = True
        next_reminder = as_of.date()
    elif status == WellGuideStatus.DUE_FOR_A_VISIT and not due_for_visit_sent:
        due_for_visit_sent = True
        next_reminder = as_of.date()

    logger.debug(
        f"Classified {months_elapsed:.3f} months elapsed "
        f"(recurrence {record.recurrence_months}) as {status.value}"
    )

    return GuideStatusResult(
        last_appointment_date=record.last_appointment_date,
        recurrence_months=record.recurrence_months,
        status=status,
        due_in_one_month_reminder_sent=due_in_one_month_sent,
        due_for_visit_reminder_sent=due_for_visit_sent,
        next_reminder=next_reminder,
        months_elapsed=months_elapsed,
    )


def start_new_cycle(record: GuideStatusInput, baseline_reminder: date) -> GuideStatusInput:
    """Reset reminder bookkeeping when a new appointment date is recorded."""
    return replace(
        record,
        due_in_one_month_reminder_sent=False,
        due_for_visit_reminder_sent=False,
        next_reminder=baseline_reminder,
    )
