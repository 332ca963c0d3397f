from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class ReportResponse(BaseModel):
    id: UUID
    patient_id: UUID
    reading_id: UUID | None = None
    summary: str
    diagnosis: str
    recommendations: str
    urgency_level: str
    additional_notes: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
