"""
Well guide service.

Business logic shared by the well guide API and the status refresh job:
recording a patient's last appointment, enabling reminders, listing records
and recomputing statuses as time passes.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union

from sqlalchemy.orm import Session

from models import PatientWellGuide, WellGuide
from services.recurrence_catalog import RecurrenceCatalog, get_recurrence_catalog
from services.well_guide_errors import GuideRecordNotFound, InvalidTimestamp, MissingIdentity
from services.well_guide_record_store import GuideCatalogStore, GuideRecordStore
from services.well_guide_reminder_scheduler import WellGuideReminderScheduler
from services.well_guide_status_engine import (
    GuideStatusInput,
    GuideStatusResult,
    compute_status,
    start_new_cycle,
)
from utils.datetime_utils import (
    ensure_utc,
    epoch_millis_to_utc,
    format_utc_offset,
    parse_utc_offset,
    utc_now,
)

logger = logging.getLogger(__name__)


@dataclass
class EnableReminderResult:
    """Outcome of the enable-reminder action."""
    record: PatientWellGuide
    next_routine_month: str
    next_routine_year: int


def _status_input(record: PatientWellGuide, recurrence_months: int) -> GuideStatusInput:
    return GuideStatusInput(
        last_appointment_date=ensure_utc(record.last_appointment_date),
        recurrence_months=recurrence_months,
        due_in_one_month_reminder_sent=record.due_in_one_month_reminder_sent,
        due_for_visit_reminder_sent=record.due_for_visit_reminder_sent,
        next_reminder=record.next_reminder,
    )


def _require_patient_id(patient_id: Optional[int]) -> int:
    if not patient_id:
        raise MissingIdentity()
    return patient_id


class WellGuideService:
    """
    Service class for well guide operations.

    The recurrence catalog is injected so callers (and tests) can supply
    their own recurrence periods; it defaults to the configured catalog.
    """

    def __init__(self, catalog: Optional[RecurrenceCatalog] = None):
        self.catalog = catalog or get_recurrence_catalog()

    def record_appointment(
        self,
        db: Session,
        patient_id: Optional[int],
        well_guide_id: int,
        last_appointment_date: Union[str, int],
        utc_offset: Union[str, int, None],
        as_of: Optional[datetime] = None
    ) -> PatientWellGuide:
        """
        Record the last appointment date for a guide and recompute its status.

        A different appointment date than the stored one starts a new
        recurrence cycle: both reminder-sent flags are cleared and the next
        reminder falls back to tomorrow before the status engine runs.

        Args:
            db: Database session
            patient_id: Patient ID (0 or None is rejected)
            well_guide_id: Well guide ID
            last_appointment_date: Epoch milliseconds
            utc_offset: UTC offset the patient submitted the date with
            as_of: Evaluation instant, defaults to now

        Returns:
            The persisted record

        Raises:
            MissingIdentity: If patient_id is missing
            UnknownGuide: If the guide is not in the recurrence catalog
            InvalidTimestamp: If the date or offset cannot be parsed
        """
        patient_id = _require_patient_id(patient_id)
        recurrence_months = self.catalog.recurrence_months(well_guide_id)

        try:
            appointment_at = epoch_millis_to_utc(last_appointment_date, utc_offset)
            normalized_offset = format_utc_offset(parse_utc_offset(utc_offset))
        except ValueError as e:
            raise InvalidTimestamp(str(e), last_appointment_date) from e

        as_of = ensure_utc(as_of) if as_of is not None else utc_now()
        store = GuideRecordStore(db)

        try:
            existing = store.find(patient_id, well_guide_id, for_update=True)
            if existing is None or ensure_utc(existing.last_appointment_date) != appointment_at:
                state = start_new_cycle(
                    GuideStatusInput(last_appointment_date=appointment_at, recurrence_months=recurrence_months),
                    baseline_reminder=as_of.date() + timedelta(days=1)
                )
                logger.info(
                    f"Starting new well guide cycle for patient {patient_id}, guide {well_guide_id} "
                    f"(last appointment {appointment_at.isoformat()})"
                )
            else:
                state = _status_input(existing, recurrence_months)

            result = compute_status(state, as_of=as_of)

            record = store.upsert({
                "patient_id": patient_id,
                "well_guide_id": well_guide_id,
                "last_appointment_date": appointment_at,
                "utc_offset": normalized_offset,
                "status": result.status.value,
                "next_reminder": result.next_reminder,
                "due_in_one_month_reminder_sent": result.due_in_one_month_reminder_sent,
                "due_for_visit_reminder_sent": result.due_for_visit_reminder_sent,
            })
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"Recorded well guide {well_guide_id} for patient {patient_id}: "
            f"status={result.status.value}, next_reminder={result.next_reminder}"
        )
        return record

    def enable_reminder(
        self,
        db: Session,
        patient_id: Optional[int],
        well_guide_id: int,
        reminder_enabled: bool,
        today: Optional[date] = None
    ) -> EnableReminderResult:
        """
        Turn reminders on or off for a patient's guide.

        Enabling reminders on a dueInOneMonth or dueForAVisit record moves
        next_reminder to the follow-up date; other statuses keep it as is.

        Raises:
            MissingIdentity: If patient_id is missing
            UnknownGuide: If the guide is not in the recurrence catalog
            GuideRecordNotFound: If the patient never recorded this guide
        """
        patient_id = _require_patient_id(patient_id)
        recurrence_months = self.catalog.recurrence_months(well_guide_id)
        store = GuideRecordStore(db)

        try:
            record = store.find(patient_id, well_guide_id, for_update=True)
            if record is None:
                raise GuideRecordNotFound(patient_id, well_guide_id)

            record.reminder_enabled = reminder_enabled
            if reminder_enabled:
                next_reminder = WellGuideReminderScheduler.next_reminder_date(record.status, today=today)
                if next_reminder is not None:
                    record.next_reminder = next_reminder
            db.commit()
        except Exception:
            db.rollback()
            raise

        month, year = WellGuideReminderScheduler.next_routine_display(
            record.last_appointment_date, recurrence_months
        )
        logger.info(
            f"Set reminders {'on' if reminder_enabled else 'off'} for patient {patient_id}, "
            f"guide {well_guide_id} (next reminder {record.next_reminder})"
        )
        return EnableReminderResult(record=record, next_routine_month=month, next_routine_year=year)

    def get_patient_guides(self, db: Session, patient_id: Optional[int]) -> List[PatientWellGuide]:
        """Get all well guide records of a patient joined with guide and booking."""
        patient_id = _require_patient_id(patient_id)
        return GuideRecordStore(db).list_by_patient(patient_id)

    def list_guides(self, db: Session) -> List[Tuple[WellGuide, int]]:
        """Get all catalog guides paired with their recurrence period."""
        return [
            (guide, self.catalog.recurrence_months(guide.id))
            for guide in GuideCatalogStore(db).list_all_guides()
        ]

    def refresh_statuses(self, db: Session, as_of: Optional[datetime] = None) -> int:
        """
        Recompute the status of every record.

        The reminder-sent flags make this safe to run repeatedly: a reminder
        is scheduled at most once per cycle.

        Returns:
            Number of records whose status or reminder bookkeeping changed
        """
        as_of = ensure_utc(as_of) if as_of is not None else utc_now()
        changed = 0

        for record in GuideRecordStore(db).list_all_records():
            if record.well_guide_id not in self.catalog:
                logger.warning(f"Skipping well guide record {record.id}: guide {record.well_guide_id} is not in the catalog")
                continue

            result = compute_status(
                _status_input(record, self.catalog.recurrence_months(record.well_guide_id)),
                as_of=as_of
            )
            if _apply_result(record, result):
                changed += 1

        db.commit()
        logger.info(f"Refreshed well guide statuses: {changed} record(s) changed")
        return changed


def _apply_result(record: PatientWellGuide, result: GuideStatusResult) -> bool:
    """Copy engine output onto a record; returns True if anything changed."""
    updates = {
        "status": result.status.value,
        "next_reminder": result.next_reminder,
        "due_in_one_month_reminder_sent": result.due_in_one_month_reminder_sent,
        "due_for_visit_reminder_sent": result.due_for_visit_reminder_sent,
    }
    changed = False
    for field, value in updates.items():
        if getattr(record, field) != value:
            setattr(record, field, value)
            changed = True
    return changed
