"""
Persistence for well guide records and the well guide catalog.

GuideRecordStore owns the patient_well_guides table. Its upsert is a single
INSERT ... ON CONFLICT (patient_id, well_guide_id) DO UPDATE statement, so
concurrent submissions for the same pair can never produce two rows.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, contains_eager

from models import Booking, PatientWellGuide, WellGuide
from utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

# Columns written by upsert; created_at is only set on insert
UPSERT_COLUMNS = (
    "last_appointment_date",
    "utc_offset",
    "status",
    "next_reminder",
    "due_in_one_month_reminder_sent",
    "due_for_visit_reminder_sent",
)

_CONFLICT_COLUMNS = ["patient_id", "well_guide_id"]


def _dialect_insert(db: Session):
    """Pick the INSERT construct that supports ON CONFLICT for the bound dialect."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
        return insert
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
        return insert
    raise NotImplementedError(f"Atomic upsert is not supported for dialect '{dialect}'")


class GuideRecordStore:
    """Read and write access to patient well guide records."""

    def __init__(self, db: Session):
        self.db = db

    def find(
        self,
        patient_id: int,
        well_guide_id: int,
        for_update: bool = False
    ) -> Optional[PatientWellGuide]:
        """
        Get the record for a (patient, guide) pair.

        Args:
            patient_id: Patient ID
            well_guide_id: Well guide ID
            for_update: Lock the row until the transaction ends

        Returns:
            The record, or None if the patient has none for this guide
        """
        query = self.db.query(PatientWellGuide).populate_existing().filter(
            PatientWellGuide.patient_id == patient_id,
            PatientWellGuide.well_guide_id == well_guide_id
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    def upsert(self, values: Dict[str, Any]) -> PatientWellGuide:
        """
        Create or replace the record keyed by (patient_id, well_guide_id).

        Args:
            values: Column values; must include patient_id and well_guide_id

        Returns:
            The persisted record as stored after the statement
        """
        now = utc_now()
        row = {column: values[column] for column in UPSERT_COLUMNS if column in values}
        row["patient_id"] = values["patient_id"]
        row["well_guide_id"] = values["well_guide_id"]
        row["created_at"] = now
        row["updated_at"] = now

        insert = _dialect_insert(self.db)
        stmt = insert(PatientWellGuide).values(**row)
        update_columns = [column for column in UPSERT_COLUMNS if column in values] + ["updated_at"]
        stmt = stmt.on_conflict_do_update(
            index_elements=_CONFLICT_COLUMNS,
            set_={column: stmt.excluded[column] for column in update_columns}
        )
        self.db.execute(stmt)

        record = self.find(values["patient_id"], values["well_guide_id"])
        if record is None:
            # The row was written by the statement above in this transaction
            raise RuntimeError(
                f"Upserted well guide record for patient {values['patient_id']} "
                f"and guide {values['well_guide_id']} could not be read back"
            )
        logger.debug(f"Upserted well guide record {record.id} (patient {record.patient_id}, guide {record.well_guide_id})")
        return record

    def list_by_patient(self, patient_id: int) -> List[PatientWellGuide]:
        """Get a patient's records with their guide and booking loaded."""
        return self.db.query(PatientWellGuide).outerjoin(
            WellGuide, PatientWellGuide.well_guide_id == WellGuide.id
        ).outerjoin(
            Booking, PatientWellGuide.booking_id == Booking.id
        ).options(
            contains_eager(PatientWellGuide.well_guide),
            contains_eager(PatientWellGuide.booking)
        ).filter(
            PatientWellGuide.patient_id == patient_id
        ).order_by(PatientWellGuide.well_guide_id).all()

    def list_all_records(self) -> List[PatientWellGuide]:
        """Get every record, ordered by id, for the status refresh job."""
        return self.db.query(PatientWellGuide).order_by(PatientWellGuide.id).all()


class GuideCatalogStore:
    """Read-only access to the well guide catalog."""

    def __init__(self, db: Session):
        self.db = db

    def list_all_guides(self) -> List[WellGuide]:
        return self.db.query(WellGuide).order_by(WellGuide.id).all()

    def get_guide(self, well_guide_id: int) -> Optional[WellGuide]:
        return self.db.query(WellGuide).filter(WellGuide.id == well_guide_id).first()
