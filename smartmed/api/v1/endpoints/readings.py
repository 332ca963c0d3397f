from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from smartmed.api.v1.endpoints.auth import get_current_doctor
from smartmed.core.cache import CacheInvalidator, get_cache_invalidator
from smartmed.core.database import get_db
from smartmed.core.errors import ErrorKind, ServiceError
from smartmed.models.doctor import Doctor
from smartmed.schemas.reading import ReadingCount, ReadingCreate, ReadingResponse
from smartmed.services.reading_service import (
    create_reading,
    delete_reading_by_id,
    get_num_readings_by_doctor_id,
    require_reading,
)

router = APIRouter()

ERROR_STATUS = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONSTRAINT_VIOLATION: status.HTTP_409_CONFLICT,
    ErrorKind.TRANSPORT_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_exception(exc: ServiceError) -> HTTPException:
    return HTTPException(status_code=ERROR_STATUS[exc.kind], detail=exc.message)


@router.post(
    "",
    response_model=ReadingResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reading_endpoint(
    payload: ReadingCreate,
    db: Session = Depends(get_db),
    invalidator: CacheInvalidator = Depends(get_cache_invalidator),
    doctor: Doctor = Depends(get_current_doctor),
) -> ReadingResponse:
    """
    Record a reading for a patient.

    Rules:
    - Append-only: readings are never edited
    - Unknown patient -> 409 (foreign key)
    """
    try:
        reading = create_reading(db, payload, invalidator=invalidator)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return ReadingResponse.model_validate(reading)


@router.get("/count", response_model=ReadingCount)
def count_my_readings(
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor),
) -> ReadingCount:
    """
    Number of readings across all patients of the current doctor.
    """
    try:
        return ReadingCount(count=get_num_readings_by_doctor_id(db, doctor.id))
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/{reading_id}", response_model=ReadingResponse)
def get_reading(
    reading_id: UUID,
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor),
) -> ReadingResponse:
    try:
        reading = require_reading(db, reading_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return ReadingResponse.model_validate(reading)


@router.delete("/{reading_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reading(
    reading_id: UUID,
    db: Session = Depends(get_db),
    invalidator: CacheInvalidator = Depends(get_cache_invalidator),
    doctor: Doctor = Depends(get_current_doctor),
) -> Response:
    """
    Delete a reading. Deleting an unknown reading still returns 204.
    """
    try:
        delete_reading_by_id(db, reading_id, invalidator=invalidator)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
