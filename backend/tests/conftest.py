"""
Test configuration and shared fixtures for the Well Guide test suite.

Each test gets its own database with the full schema created from the
SQLAlchemy models. By default this is an in-memory SQLite database; set
TEST_DATABASE_URL to run against PostgreSQL instead.
"""

import os

# Must be set before core.database creates the application engine
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite://")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)

import pytest
from datetime import datetime, timedelta
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from core.constants import WELL_GUIDE_SEED_DATA
from core.database import Base

# Import all models to ensure they're registered with SQLAlchemy before any relationships are resolved
from models.well_guide import WellGuide
from models.booking import Booking
from models.patient_well_guide import PatientWellGuide
from utils.datetime_utils import UTC


# Fixed evaluation instant used across tests
AS_OF = datetime(2026, 10, 17, 12, 0, 0, tzinfo=UTC)


@pytest.fixture(scope="function")
def db_engine():
    """
    Create a database engine with a freshly created schema.

    In-memory SQLite needs StaticPool so every session (including the one
    used by TestClient's worker thread) shares a single connection.
    """
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )
    else:
        engine = create_engine(TEST_DATABASE_URL, poolclass=NullPool, echo=False)

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Provide a database session bound to the per-test engine."""
    TestingSession = sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)
    session = TestingSession()

    yield session

    session.close()


@pytest.fixture
def well_guides(db_session):
    """Seed the well guide catalog table."""
    guides = [WellGuide(**entry) for entry in WELL_GUIDE_SEED_DATA]
    db_session.add_all(guides)
    db_session.commit()
    return guides


def epoch_millis(dt: datetime) -> str:
    """Epoch milliseconds of a datetime, as the API expects it."""
    return str(int(dt.timestamp() * 1000))


def months_before(as_of: datetime, months: float) -> datetime:
    """Instant exactly ``months`` average months before ``as_of``."""
    from core.constants import AVERAGE_DAYS_PER_MONTH
    return as_of - timedelta(days=months * AVERAGE_DAYS_PER_MONTH)


def create_patient_well_guide(
    db_session: Session,
    patient_id: int,
    well_guide_id: int,
    last_appointment_date: datetime,
    status: str = "uptodate",
    **kwargs
) -> PatientWellGuide:
    """Insert a patient well guide record directly."""
    record = PatientWellGuide(
        patient_id=patient_id,
        well_guide_id=well_guide_id,
        last_appointment_date=last_appointment_date,
        status=status,
        **kwargs
    )
    db_session.add(record)
    db_session.commit()
    return record


def create_booking(db_session: Session, start_time: datetime, booking_time_zone: str = "America/New_York") -> Booking:
    """Insert a booking owned by the scheduling subsystem."""
    booking = Booking(start_time=start_time, booking_time_zone=booking_time_zone)
    db_session.add(booking)
    db_session.commit()
    return booking
