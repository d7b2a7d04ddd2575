"""
Integration tests for the well guide API endpoints.

Covers the catalog listing, recording appointments under each API version,
patient listings joined with bookings and the enable-reminder action.
"""

import pytest
from datetime import datetime, timedelta
from unittest.mock import patch
from fastapi.testclient import TestClient
from pydantic import ValidationError

from main import app
from api.well_guide import WellGuideUpdateRequest, WellGuideUpdateRequestV100
from core.database import get_db
from models import PatientWellGuide
from utils.datetime_utils import UTC
from tests.conftest import AS_OF, create_booking, create_patient_well_guide, epoch_millis, months_before


PATIENT_ID = 42


@pytest.fixture
def client(db_session):
    def override_get_db():
        return db_session
    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def frozen_now():
    with patch('services.well_guide_service.utc_now', return_value=AS_OF):
        yield AS_OF


class TestUpdateRequestModels:
    """Test the per-version request models of PUT /api/well-guide/{patient_id}."""

    def test_v100_offset_defaults_when_omitted(self):
        request = WellGuideUpdateRequestV100.model_validate(
            {"last_appointment_date": "1700000000000", "well_guide_id": 2}
        )

        assert request.off_set == "+00:00"

    @pytest.mark.parametrize("off_set", [None, "", "  "])
    def test_v100_blank_offset_defaults(self, off_set):
        request = WellGuideUpdateRequestV100.model_validate(
            {"last_appointment_date": "1700000000000", "well_guide_id": 2, "off_set": off_set}
        )

        assert request.off_set == "+00:00"

    def test_v100_keeps_submitted_offset(self):
        request = WellGuideUpdateRequestV100.model_validate(
            {"last_appointment_date": 1700000000000, "well_guide_id": 2, "off_set": "-04:00"}
        )

        assert request.off_set == "-04:00"

    def test_v110_requires_offset(self):
        with pytest.raises(ValidationError):
            WellGuideUpdateRequest.model_validate({"last_appointment_date": "1700000000000", "well_guide_id": 2})


class TestListWellGuides:
    """Test GET /api/well-guide."""

    def test_lists_catalog_with_recurrence(self, client, well_guides):
        response = client.get("/api/well-guide")

        assert response.status_code == 200
        guides = response.json()["well_guides"]
        assert [g["id"] for g in guides] == [1, 2, 3, 4, 5, 6, 7]
        dental = guides[1]
        assert dental["name"] == "Dental Cleaning"
        assert dental["recurrence_months"] == 6

    def test_empty_catalog(self, client):
        response = client.get("/api/well-guide")

        assert response.status_code == 200
        assert response.json() == {"well_guides": []}


class TestRecordAppointment:
    """Test PUT /api/well-guide/{patient_id}."""

    def test_latest_version_records_appointment(self, client, well_guides, frozen_now, db_session):
        response = client.put(
            f"/api/well-guide/{PATIENT_ID}",
            json={
                "last_appointment_date": epoch_millis(months_before(AS_OF, 5.5)),
                "well_guide_id": 2,
                "off_set": "+0530",
            },
            headers={"X-API-Version": "1.1.0"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["patient_id"] == PATIENT_ID
        assert data["well_guide_id"] == 2
        assert data["status"] == "dueInOneMonth"
        assert data["utc_offset"] == "+05:30"
        assert data["next_reminder"] == AS_OF.date().isoformat()
        assert data["due_in_one_month_reminder_sent"] is True
        assert data["due_for_visit_reminder_sent"] is False
        assert data["reminder_enabled"] is False
        assert db_session.query(PatientWellGuide).count() == 1

    def test_missing_header_uses_latest_version(self, client, well_guides, frozen_now):
        response = client.put(
            f"/api/well-guide/{PATIENT_ID}",
            json={"last_appointment_date": epoch_millis(months_before(AS_OF, 1)), "well_guide_id": 2},
        )

        assert response.status_code == 422

    def test_latest_version_rejects_blank_offset(self, client, well_guides, frozen_now):
        response = client.put(
            f"/api/well-guide/{PATIENT_ID}",
            json={"last_appointment_date": epoch_millis(months_before(AS_OF, 1)), "well_guide_id": 2, "off_set": "  "},
            headers={"X-API-Version": "1.1.0"},
        )

        assert response.status_code == 422

    def test_version_1_0_0_defaults_offset(self, client, well_guides, frozen_now):
        response = client.put(
            f"/api/well-guide/{PATIENT_ID}",
            json={"last_appointment_date": int(epoch_millis(months_before(AS_OF, 1))), "well_guide_id": 2},
            headers={"X-API-Version": "1.0.0"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["utc_offset"] == "+00:00"
        assert data["status"] == "uptodate"
        assert data["next_reminder"] == (AS_OF.date() + timedelta(days=1)).isoformat()

    @pytest.mark.parametrize("off_set", [None, "", "   "])
    def test_version_1_0_0_defaults_blank_offset(self, client, well_guides, frozen_now, off_set):
        response = client.put(
            f"/api/well-guide/{PATIENT_ID}",
            json={"last_appointment_date": epoch_millis(months_before(AS_OF, 1)), "well_guide_id": 2, "off_set": off_set},
            headers={"X-API-Version": "1.0.0"},
        )

        assert response.status_code == 200
        assert response.json()["utc_offset"] == "+00:00"

    def test_unsupported_version(self, client, well_guides, frozen_now):
        response = client.put(
            f"/api/well-guide/{PATIENT_ID}",
            json={"last_appointment_date": epoch_millis(AS_OF), "well_guide_id": 2, "off_set": "+00:00"},
            headers={"X-API-Version": "2.0.0"},
        )

        assert response.status_code == 400
        assert "2.0.0" in response.json()["detail"]

    def test_repeat_submission_keeps_single_row(self, client, well_guides, frozen_now, db_session):
        payload = {
            "last_appointment_date": epoch_millis(months_before(AS_OF, 7)),
            "well_guide_id": 2,
            "off_set": "-04:00",
        }

        first = client.put(f"/api/well-guide/{PATIENT_ID}", json=payload)
        second = client.put(f"/api/well-guide/{PATIENT_ID}", json=payload)

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["status"] == "dueForAVisit"
        assert second.json()["next_reminder"] == first.json()["next_reminder"]
        assert db_session.query(PatientWellGuide).count() == 1

    def test_unknown_guide(self, client, well_guides, frozen_now, db_session):
        response = client.put(
            f"/api/well-guide/{PATIENT_ID}",
            json={"last_appointment_date": epoch_millis(AS_OF), "well_guide_id": 99, "off_set": "+00:00"},
        )

        assert response.status_code == 400
        assert "99" in response.json()["detail"]
        assert db_session.query(PatientWellGuide).count() == 0

    @pytest.mark.parametrize("payload", [
        {"last_appointment_date": "yesterday", "well_guide_id": 2, "off_set": "+00:00"},
        {"last_appointment_date": "1700000000000", "well_guide_id": 2, "off_set": "+42:00"},
    ])
    def test_invalid_timestamp(self, client, well_guides, frozen_now, payload):
        response = client.put(f"/api/well-guide/{PATIENT_ID}", json=payload)

        assert response.status_code == 400

    @pytest.mark.parametrize("payload", [
        {"well_guide_id": 2, "off_set": "+00:00"},
        {"last_appointment_date": "1700000000000", "off_set": "+00:00"},
        {"last_appointment_date": "1700000000000", "well_guide_id": 0, "off_set": "+00:00"},
    ])
    def test_malformed_body(self, client, well_guides, frozen_now, payload):
        response = client.put(f"/api/well-guide/{PATIENT_ID}", json=payload)

        assert response.status_code == 422

    def test_missing_patient(self, client, well_guides, frozen_now):
        response = client.put(
            "/api/well-guide/0",
            json={"last_appointment_date": epoch_millis(AS_OF), "well_guide_id": 2, "off_set": "+00:00"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Please complete the onboarding process."

    def test_unexpected_errors_return_500(self, client, well_guides):
        with patch('services.well_guide_service.WellGuideService.record_appointment', side_effect=RuntimeError("boom")):
            response = client.put(
                f"/api/well-guide/{PATIENT_ID}",
                json={"last_appointment_date": epoch_millis(AS_OF), "well_guide_id": 2, "off_set": "+00:00"},
            )

        assert response.status_code == 500
        assert response.json()["detail"] == "Unable to update well guide"


class TestGetPatientWellGuides:
    """Test GET /api/well-guide/{patient_id}."""

    def test_lists_records_with_guide_and_booking(self, client, well_guides, db_session):
        booking = create_booking(db_session, start_time=datetime(2026, 11, 2, 14, 0, tzinfo=UTC))
        create_patient_well_guide(
            db_session, PATIENT_ID, 2,
            last_appointment_date=months_before(AS_OF, 5.5),
            status="dueInOneMonth",
            booking_id=booking.id,
        )
        create_patient_well_guide(db_session, PATIENT_ID, 1, last_appointment_date=months_before(AS_OF, 2))
        create_patient_well_guide(db_session, PATIENT_ID + 1, 3, last_appointment_date=months_before(AS_OF, 2))

        response = client.get(f"/api/well-guide/{PATIENT_ID}")

        assert response.status_code == 200
        records = response.json()["well_guides"]
        assert [r["well_guide_id"] for r in records] == [1, 2]
        assert records[0]["well_guide_name"] == "Annual Physical"
        assert records[0]["well_guide_status"] == "uptodate"
        assert records[0]["start_time"] is None
        assert records[1]["well_guide_status"] == "dueInOneMonth"
        assert records[1]["booking_time_zone"] == "America/New_York"
        assert records[1]["start_time"].startswith("2026-11-02T14:00:00")

    def test_patient_without_records(self, client, well_guides):
        response = client.get(f"/api/well-guide/{PATIENT_ID}")

        assert response.status_code == 200
        assert response.json() == {"well_guides": []}

    def test_missing_patient(self, client, well_guides):
        response = client.get("/api/well-guide/0")

        assert response.status_code == 400


class TestEnableReminder:
    """Test PUT /api/well-guide/{patient_id}/remindMe."""

    def test_enable_reminder_when_overdue(self, client, well_guides, db_session):
        create_patient_well_guide(
            db_session, PATIENT_ID, 2,
            last_appointment_date=datetime(2026, 3, 1, 9, 0, tzinfo=UTC),
            status="dueForAVisit",
            due_for_visit_reminder_sent=True,
        )

        with patch('services.well_guide_reminder_scheduler.utc_today', return_value=AS_OF.date()):
            response = client.put(
                f"/api/well-guide/{PATIENT_ID}/remindMe",
                json={"reminder": True, "well_guide_id": 2},
            )

        assert response.status_code == 200
        data = response.json()
        assert data["well_guide"]["reminder_enabled"] is True
        assert data["well_guide"]["next_reminder"] == (AS_OF.date() + timedelta(days=14)).isoformat()
        assert data["next_routine_month"] == "September"
        assert data["next_routine_year"] == 2026

    def test_disable_reminder(self, client, well_guides, db_session):
        create_patient_well_guide(
            db_session, PATIENT_ID, 2,
            last_appointment_date=datetime(2026, 3, 1, 9, 0, tzinfo=UTC),
            status="uptodate",
            reminder_enabled=True,
        )

        response = client.put(
            f"/api/well-guide/{PATIENT_ID}/remindMe",
            json={"reminder": False, "well_guide_id": 2},
        )

        assert response.status_code == 200
        assert response.json()["well_guide"]["reminder_enabled"] is False

    def test_record_not_found(self, client, well_guides):
        response = client.put(
            f"/api/well-guide/{PATIENT_ID}/remindMe",
            json={"reminder": True, "well_guide_id": 2},
        )

        assert response.status_code == 404

    def test_unknown_guide(self, client, well_guides):
        response = client.put(
            f"/api/well-guide/{PATIENT_ID}/remindMe",
            json={"reminder": True, "well_guide_id": 99},
        )

        assert response.status_code == 400

    def test_malformed_body(self, client, well_guides):
        response = client.put(
            f"/api/well-guide/{PATIENT_ID}/remindMe",
            json={"well_guide_id": 2},
        )

        assert response.status_code == 422
