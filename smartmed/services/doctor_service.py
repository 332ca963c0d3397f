from uuid import UUID

from sqlalchemy.orm import Session

from smartmed.models.doctor import Doctor


def get_doctor_by_id(db: Session, doctor_id: UUID) -> Doctor | None:
    return db.get(Doctor, doctor_id)
