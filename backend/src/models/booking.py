"""
Booking model, owned by the scheduling subsystem.

Well guide records only read bookings to show the start time of the visit
linked to a guide; nothing in this service writes them.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base


class Booking(Base):
    """Scheduled visit with its start time and the timezone it was booked in."""

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the booking."""

    start_time: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Start of the booked visit."""

    booking_time_zone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    """IANA timezone the booking was made in (e.g. 'America/New_York')."""
