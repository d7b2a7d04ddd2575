# pyright: reportMissingTypeStubs=false
"""
Well guide API endpoints.

PUT /well-guide/{patient_id} is versioned through the X-API-Version header:
1.0.0 accepts requests without a UTC offset, 1.1.0 (the default) requires it.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Type, Union

from fastapi import APIRouter, Body, Depends, Header, HTTPException
from fastapi import status as http_status
from pydantic import BaseModel, Field, ValidationError, field_validator
from sqlalchemy.orm import Session

from core.constants import (
    DEFAULT_UTC_OFFSET,
    WELL_GUIDE_API_LATEST_VERSION,
    WELL_GUIDE_API_VERSION_1_0_0,
    WELL_GUIDE_API_VERSION_1_1_0,
    WELL_GUIDE_API_VERSION_HEADER,
)
from core.database import get_db
from models import PatientWellGuide
from services.well_guide_errors import GuideRecordNotFound, WellGuideError
from services.well_guide_service import WellGuideService
from utils.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)

router = APIRouter()


def get_well_guide_service() -> WellGuideService:
    """FastAPI dependency providing the well guide service."""
    return WellGuideService()


# ===== Request/Response Models =====

class WellGuideUpdateRequest(BaseModel):
    """Request model for recording an appointment (API 1.1.0)."""
    last_appointment_date: Union[int, str] = Field(..., description="Epoch milliseconds of the last appointment")
    well_guide_id: int = Field(..., gt=0)
    off_set: str = Field(..., description="UTC offset of the submitted time, e.g. '+05:30'")

    @field_validator('off_set')
    @classmethod
    def validate_off_set(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("off_set must not be blank")
        return v


class WellGuideUpdateRequestV100(BaseModel):
    """Request model for recording an appointment (API 1.0.0, offset optional)."""
    last_appointment_date: Union[int, str]
    well_guide_id: int = Field(..., gt=0)
    off_set: Optional[str] = Field(DEFAULT_UTC_OFFSET, validate_default=True)

    @field_validator('off_set')
    @classmethod
    def default_blank_off_set(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return DEFAULT_UTC_OFFSET
        return v


class WellGuideReminderRequest(BaseModel):
    """Request model for enabling or disabling reminders."""
    reminder: bool
    well_guide_id: int = Field(..., gt=0)


class WellGuideResponse(BaseModel):
    """Response model for a catalog guide."""
    id: int
    name: str
    speciality: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    recurrence_months: int


class WellGuideListResponse(BaseModel):
    """Response model for listing the guide catalog."""
    well_guides: List[WellGuideResponse]


class PatientWellGuideResponse(BaseModel):
    """Response model for a patient's well guide record."""
    patient_id: int
    well_guide_id: int
    last_appointment_date: datetime
    utc_offset: Optional[str] = None
    status: str
    next_reminder: Optional[date] = None
    due_in_one_month_reminder_sent: bool
    due_for_visit_reminder_sent: bool
    reminder_enabled: bool


class PatientWellGuideDetailResponse(BaseModel):
    """Response model for a record joined with guide and booking details."""
    patient_id: int
    well_guide_id: int
    last_appointment_date: datetime
    well_guide_status: str
    well_guide_name: Optional[str] = None
    well_guide_speciality: Optional[str] = None
    well_guide_description: Optional[str] = None
    well_guide_image_url: Optional[str] = None
    next_reminder: Optional[date] = None
    reminder_enabled: bool
    start_time: Optional[datetime] = None
    booking_time_zone: Optional[str] = None


class PatientWellGuideListResponse(BaseModel):
    """Response model for listing a patient's records."""
    well_guides: List[PatientWellGuideDetailResponse]


class WellGuideReminderResponse(BaseModel):
    """Response model for the enable-reminder action."""
    well_guide: PatientWellGuideResponse
    next_routine_month: str
    next_routine_year: int


def _record_response(record: PatientWellGuide) -> PatientWellGuideResponse:
    return PatientWellGuideResponse(
        patient_id=record.patient_id,
        well_guide_id=record.well_guide_id,
        last_appointment_date=ensure_utc(record.last_appointment_date),
        utc_offset=record.utc_offset,
        status=record.status,
        next_reminder=record.next_reminder,
        due_in_one_month_reminder_sent=record.due_in_one_month_reminder_sent,
        due_for_visit_reminder_sent=record.due_for_visit_reminder_sent,
        reminder_enabled=record.reminder_enabled,
    )


def _detail_response(record: PatientWellGuide) -> PatientWellGuideDetailResponse:
    guide = record.well_guide
    booking = record.booking
    return PatientWellGuideDetailResponse(
        patient_id=record.patient_id,
        well_guide_id=record.well_guide_id,
        last_appointment_date=ensure_utc(record.last_appointment_date),
        well_guide_status=record.status,
        well_guide_name=guide.name if guide else None,
        well_guide_speciality=guide.speciality if guide else None,
        well_guide_description=guide.description if guide else None,
        well_guide_image_url=guide.image_url if guide else None,
        next_reminder=record.next_reminder,
        reminder_enabled=record.reminder_enabled,
        start_time=ensure_utc(booking.start_time) if booking else None,
        booking_time_zone=booking.booking_time_zone if booking else None,
    )


def _bad_request(e: WellGuideError) -> HTTPException:
    return HTTPException(status_code=http_status.HTTP_400_BAD_REQUEST, detail=e.message)


# Request model per API version for PUT /well-guide/{patient_id}
UPDATE_REQUEST_MODELS: Dict[str, Type[BaseModel]] = {
    WELL_GUIDE_API_VERSION_1_0_0: WellGuideUpdateRequestV100,
    WELL_GUIDE_API_VERSION_1_1_0: WellGuideUpdateRequest,
}


def _parse_versioned_body(api_version: Optional[str], body: Dict[str, Any]) -> BaseModel:
    version = (api_version or WELL_GUIDE_API_LATEST_VERSION).strip()
    model = UPDATE_REQUEST_MODELS.get(version)
    if model is None:
        raise HTTPException(
            status_code=http_status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported API version '{version}'. Supported: {', '.join(sorted(UPDATE_REQUEST_MODELS))}"
        )
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False)
        )


# ===== Endpoints =====

@router.get("/well-guide", summary="List all well guides")
async def get_well_guide_list(
    db: Session = Depends(get_db),
    service: WellGuideService = Depends(get_well_guide_service)
) -> WellGuideListResponse:
    """Get the well guide catalog with each guide's recurrence period."""
    try:
        return WellGuideListResponse(
            well_guides=[
                WellGuideResponse(
                    id=guide.id,
                    name=guide.name,
                    speciality=guide.speciality,
                    description=guide.description,
                    image_url=guide.image_url,
                    recurrence_months=recurrence_months,
                )
                for guide, recurrence_months in service.list_guides(db)
            ]
        )
    except Exception as e:
        logger.exception(f"Failed to list well guides: {e}")
        raise HTTPException(
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to load well guides"
        )


@router.get("/well-guide/{patient_id}", summary="Get a patient's well guides")
async def get_well_guide_by_patient(
    patient_id: int,
    db: Session = Depends(get_db),
    service: WellGuideService = Depends(get_well_guide_service)
) -> PatientWellGuideListResponse:
    """Get the well guide records of a patient."""
    try:
        records = service.get_patient_guides(db, patient_id)
        return PatientWellGuideListResponse(well_guides=[_detail_response(r) for r in records])
    except WellGuideError as e:
        raise _bad_request(e)
    except Exception as e:
        logger.exception(f"Failed to get well guides for patient {patient_id}: {e}")
        raise HTTPException(
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to load well guides"
        )


@router.put("/well-guide/{patient_id}", summary="Record the last appointment for a well guide")
async def update_well_guide_detail(
    patient_id: int,
    body: Dict[str, Any] = Body(...),
    api_version: Optional[str] = Header(None, alias=WELL_GUIDE_API_VERSION_HEADER),
    db: Session = Depends(get_db),
    service: WellGuideService = Depends(get_well_guide_service)
) -> PatientWellGuideResponse:
    """Record the last appointment date and return the recomputed record."""
    request = _parse_versioned_body(api_version, body)
    try:
        record = service.record_appointment(
            db,
            patient_id=patient_id,
            well_guide_id=request.well_guide_id,
            last_appointment_date=request.last_appointment_date,
            utc_offset=request.off_set,
        )
        return _record_response(record)
    except WellGuideError as e:
        raise _bad_request(e)
    except Exception as e:
        logger.exception(f"Failed to update well guide for patient {patient_id}: {e}")
        raise HTTPException(
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to update well guide"
        )


@router.put("/well-guide/{patient_id}/remindMe", summary="Turn reminders on or off for a well guide")
async def enable_reminder(
    patient_id: int,
    request: WellGuideReminderRequest,
    db: Session = Depends(get_db),
    service: WellGuideService = Depends(get_well_guide_service)
) -> WellGuideReminderResponse:
    """Turn reminders on or off and report the month of the next routine visit."""
    try:
        result = service.enable_reminder(
            db,
            patient_id=patient_id,
            well_guide_id=request.well_guide_id,
            reminder_enabled=request.reminder,
        )
        return WellGuideReminderResponse(
            well_guide=_record_response(result.record),
            next_routine_month=result.next_routine_month,
            next_routine_year=result.next_routine_year,
        )
    except GuideRecordNotFound as e:
        raise HTTPException(status_code=http_status.HTTP_404_NOT_FOUND, detail=e.message)
    except WellGuideError as e:
        raise _bad_request(e)
    except Exception as e:
        logger.exception(f"Failed to update reminder for patient {patient_id}: {e}")
        raise HTTPException(
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to update reminder"
        )
