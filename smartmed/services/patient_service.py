from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from smartmed.models.patient import Patient


def get_patient_by_id(db: Session, patient_id: UUID) -> Patient | None:
    return db.get(Patient, patient_id)


def get_patients_by_doctor_id(db: Session, doctor_id: UUID) -> list[Patient]:
    stmt = (
        select(Patient)
        .where(Patient.doctor_id == doctor_id)
        .order_by(Patient.created_at.desc())
    )
    return list(db.scalars(stmt).all())


def calculate_age(dob: date | None, today: date | None = None) -> int | None:
    """Whole years since ``dob``; None when the birth date is unknown."""
    if dob is None:
        return None
    today = today or date.today()
    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return years
