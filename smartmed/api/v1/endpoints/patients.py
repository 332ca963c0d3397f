from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from smartmed.api.v1.endpoints.auth import get_current_doctor
from smartmed.api.v1.endpoints.readings import to_http_exception
from smartmed.core.cache import CacheInvalidator, get_cache_invalidator
from smartmed.core.database import get_db
from smartmed.core.errors import ServiceError
from smartmed.models.doctor import Doctor
from smartmed.schemas.patient import PatientResponse
from smartmed.schemas.reading import ReadingCount, ReadingResponse
from smartmed.schemas.reading_form import ReadingFormDescription, describe_reading_form
from smartmed.schemas.report import ReportResponse
from smartmed.services.patient_service import get_patient_by_id
from smartmed.services.reading_form_service import ReadingForm, ReadingFormResult
from smartmed.services.reading_service import (
    get_num_readings_by_patient_id,
    get_readings_by_patient_id,
)
from smartmed.services.report_service import get_reports_by_patient_id

router = APIRouter()


@router.get("/{patient_id}", response_model=PatientResponse)
def get_patient(
    patient_id: UUID,
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor),
) -> PatientResponse:
    patient = get_patient_by_id(db, patient_id)
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")
    return PatientResponse.model_validate(patient)


@router.get("/{patient_id}/readings", response_model=list[ReadingResponse])
def list_patient_readings(
    patient_id: UUID,
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor),
) -> list[ReadingResponse]:
    """
    Readings for a patient, most recent first. Unknown patients yield [].
    """
    try:
        readings = get_readings_by_patient_id(db, patient_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return [ReadingResponse.model_validate(r) for r in readings]


@router.get("/{patient_id}/readings/count", response_model=ReadingCount)
def count_patient_readings(
    patient_id: UUID,
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor),
) -> ReadingCount:
    try:
        return ReadingCount(count=get_num_readings_by_patient_id(db, patient_id))
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/{patient_id}/readings/form", response_model=ReadingFormDescription)
def get_reading_form(
    patient_id: UUID,
    doctor: Doctor = Depends(get_current_doctor),
) -> ReadingFormDescription:
    """
    Field metadata and pre-filled values for the new-reading form.
    """
    return describe_reading_form(patient_id)


@router.post(
    "/{patient_id}/readings/form",
    response_model=ReadingFormResult,
    status_code=status.HTTP_201_CREATED,
)
def submit_reading_form(
    patient_id: UUID,
    values: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    invalidator: CacheInvalidator = Depends(get_cache_invalidator),
    doctor: Doctor = Depends(get_current_doctor),
):
    """
    Validate raw form input and record the reading. Fields the client
    leaves out are stored as not measured.

    - 201: saved, with a success notification linking to the reading
    - 422: per-field validation errors, nothing saved
    - 500: saving failed, generic error notification only
    """
    form = ReadingForm.from_submission(patient_id, values)
    result = form.submit(db, invalidator=invalidator)

    if result.ok:
        return result
    if result.errors:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=result.model_dump(mode="json"),
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=result.model_dump(mode="json"),
    )


@router.get("/{patient_id}/reports", response_model=list[ReportResponse])
def list_patient_reports(
    patient_id: UUID,
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor),
) -> list[ReportResponse]:
    reports = get_reports_by_patient_id(db, patient_id)
    return [ReportResponse.model_validate(r) for r in reports]
