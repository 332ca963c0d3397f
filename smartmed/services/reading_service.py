"""
Reading repository: every read and write of the ``readings`` table goes
through here.

Each function is its own unit of work. Database failures are rolled back,
logged with context and re-raised as ``ReadingServiceError`` carrying an
operation-named message. Mutations tell the injected invalidator which
dashboard paths went stale.
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from smartmed.core.cache import CacheInvalidator, reading_display_paths
from smartmed.core.errors import ErrorKind, ReadingServiceError
from smartmed.models.patient import Patient
from smartmed.models.reading import Reading
from smartmed.schemas.reading import ReadingCreate

logger = logging.getLogger(__name__)


def create_reading(
    db: Session,
    payload: ReadingCreate,
    *,
    invalidator: CacheInvalidator,
) -> Reading:
    """
    Insert a reading and return it with its generated id and timestamps.
    """
    logger.info(f"Creating reading for patient {payload.patient_id}")
    reading = Reading(**payload.model_dump())

    try:
        db.add(reading)
        db.commit()
        db.refresh(reading)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Failed to create reading for patient {payload.patient_id}: {e}",
            exc_info=True,
        )
        raise ReadingServiceError.from_db_error("Failed to create reading", e) from e

    invalidator.invalidate(reading_display_paths(reading.patient_id))
    return reading


def get_reading_by_id(db: Session, reading_id: UUID) -> Reading | None:
    try:
        return db.get(Reading, reading_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to get reading {reading_id}: {e}", exc_info=True)
        raise ReadingServiceError.from_db_error("Failed to get reading", e) from e


def require_reading(db: Session, reading_id: UUID) -> Reading:
    reading = get_reading_by_id(db, reading_id)
    if reading is None:
        raise ReadingServiceError("Reading not found", ErrorKind.NOT_FOUND)
    return reading


def get_readings_by_patient_id(db: Session, patient_id: UUID) -> list[Reading]:
    """All readings for a patient, newest first."""
    try:
        stmt = (
            select(Reading)
            .where(Reading.patient_id == patient_id)
            .order_by(Reading.created_at.desc(), Reading.id.desc())
        )
        return list(db.scalars(stmt).all())
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Failed to get readings for patient {patient_id}: {e}", exc_info=True
        )
        raise ReadingServiceError.from_db_error("Failed to get readings", e) from e


def get_num_readings_by_patient_id(db: Session, patient_id: UUID) -> int:
    try:
        stmt = (
            select(func.count())
            .select_from(Reading)
            .where(Reading.patient_id == patient_id)
        )
        return db.scalar(stmt) or 0
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Failed to get number of readings for patient {patient_id}: {e}",
            exc_info=True,
        )
        raise ReadingServiceError.from_db_error(
            "Failed to get number of readings", e
        ) from e


def get_num_readings_by_doctor_id(db: Session, doctor_id: UUID) -> int:
    """Readings across every patient owned by the doctor."""
    try:
        stmt = (
            select(func.count(Reading.id))
            .join(Patient, Reading.patient_id == Patient.id)
            .where(Patient.doctor_id == doctor_id)
        )
        return db.scalar(stmt) or 0
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Failed to get number of readings for doctor {doctor_id}: {e}",
            exc_info=True,
        )
        raise ReadingServiceError.from_db_error(
            "Failed to get number of readings", e
        ) from e


def delete_reading_by_id(
    db: Session,
    reading_id: UUID,
    *,
    invalidator: CacheInvalidator,
) -> None:
    """
    Delete a reading. Deleting a reading that does not exist is a no-op.
    """
    try:
        patient_id = db.scalar(
            select(Reading.patient_id).where(Reading.id == reading_id)
        )
        if patient_id is None:
            logger.warning(f"Reading with ID {reading_id} not found for deletion.")
            return

        db.query(Reading).filter(Reading.id == reading_id).delete(
            synchronize_session="fetch"
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete reading {reading_id}: {e}", exc_info=True)
        raise ReadingServiceError.from_db_error("Failed to delete reading", e) from e

    logger.info(f"Deleted reading {reading_id} for patient {patient_id}")
    invalidator.invalidate(reading_display_paths(patient_id))
