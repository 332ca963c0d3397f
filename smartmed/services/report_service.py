from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from smartmed.models.patient import Patient
from smartmed.models.report import Report


def get_reports_by_patient_id(db: Session, patient_id: UUID) -> list[Report]:
    """Reports for a patient, oldest first (the last one is the latest)."""
    stmt = (
        select(Report)
        .where(Report.patient_id == patient_id)
        .order_by(Report.created_at.asc(), Report.id.asc())
    )
    return list(db.scalars(stmt).all())


def get_num_reports_by_doctor_id(db: Session, doctor_id: UUID) -> int:
    stmt = (
        select(func.count(Report.id))
        .join(Patient, Report.patient_id == Patient.id)
        .where(Patient.doctor_id == doctor_id)
    )
    return db.scalar(stmt) or 0
