"""
Patient well guide model.

One row per (patient, well guide) pair, holding the last appointment date,
the derived status and the reminder bookkeeping of the current recurrence
cycle. Rows are created by an upsert on the first submitted appointment date
and are never deleted by this service.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import String, ForeignKey, TIMESTAMP, Date, Integer, Index, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from core.database import Base


class PatientWellGuide(Base):
    """
    Well guide record of a single patient.

    ``status`` is always derived by the status engine from
    ``last_appointment_date`` and the guide's recurrence period; it is never
    taken from a request.
    """

    __tablename__ = "patient_well_guides"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the record."""

    patient_id: Mapped[int] = mapped_column(Integer, nullable=False)
    """Patient this record belongs to (patients are owned by another service)."""

    well_guide_id: Mapped[int] = mapped_column(ForeignKey("well_guides.id"), nullable=False)
    """Reference to the well guide."""

    last_appointment_date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    """Most recent visit for this guide (UTC)."""

    utc_offset: Mapped[Optional[str]] = mapped_column(String(6), nullable=True)
    """UTC offset the patient submitted the appointment date with ('+HH:MM')."""

    status: Mapped[str] = mapped_column(String(20), nullable=False)
    """'scheduled', 'uptodate', 'dueInOneMonth' or 'dueForAVisit'."""

    next_reminder: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    """Date the next reminder notification should fire."""

    due_in_one_month_reminder_sent: Mapped[bool] = mapped_column(default=False, nullable=False)
    """Set once the 'due in one month' reminder was scheduled for the current cycle."""

    due_for_visit_reminder_sent: Mapped[bool] = mapped_column(default=False, nullable=False)
    """Set once the 'due for a visit' reminder was scheduled for the current cycle."""

    reminder_enabled: Mapped[bool] = mapped_column(default=False, nullable=False)
    """Whether the patient opted into reminders for this guide."""

    booking_id: Mapped[Optional[int]] = mapped_column(ForeignKey("bookings.id"), nullable=True)
    """Optional booking linked to this guide (read-only join)."""

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    """Timestamp when the record was created."""

    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    """Timestamp when the record was last updated."""

    # Relationships
    well_guide = relationship("WellGuide", back_populates="patient_records")
    """Relationship to the WellGuide entity."""

    booking = relationship("Booking")
    """Relationship to the linked Booking, if any."""

    __table_args__ = (
        UniqueConstraint('patient_id', 'well_guide_id', name='uq_patient_well_guides_patient_guide'),
        CheckConstraint(
            "status IN ('scheduled', 'uptodate', 'dueInOneMonth', 'dueForAVisit')",
            name='check_patient_well_guide_status'
        ),
        Index('idx_patient_well_guides_patient', 'patient_id'),
        Index('idx_patient_well_guides_next_reminder', 'next_reminder'),
    )
