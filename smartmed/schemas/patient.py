from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel


class PatientResponse(BaseModel):
    id: UUID
    name: str
    dob: date | None = None
    gender: str | None = None
    email: str | None = None
    phone: str | None = None
    doctor_id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
