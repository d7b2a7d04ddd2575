"""
Well guide model representing a recurring-care reminder program.

A well guide is tied to a health topic (annual physical, dental cleaning,
cancer screening, ...) and is shown to patients with its display metadata.
The recurrence period of each guide lives in the recurrence catalog.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from core.database import Base


class WellGuide(Base):
    """
    Well guide catalog entry.

    Read-only from the application's point of view; rows are seeded by
    scripts/seed_well_guides.py.
    """

    __tablename__ = "well_guides"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    """Guide identifier, also the key of the recurrence catalog."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    """Display name (e.g. 'Annual Physical')."""

    speciality: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    """Medical speciality the guide belongs to."""

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    """Patient-facing description."""

    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    """Illustration shown next to the guide."""

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    """Timestamp when the guide was added to the catalog."""

    # Relationships
    patient_records = relationship("PatientWellGuide", back_populates="well_guide")
    """Per-patient records for this guide."""
