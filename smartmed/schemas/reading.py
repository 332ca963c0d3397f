from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, field_validator


class ReadingCreate(BaseModel):
    patient_id: UUID
    height: float | None = None
    weight: float | None = None
    temperature: float | None = None
    heart_rate: float | None = None
    bp_systolic: float | None = None
    bp_diastolic: float | None = None
    respiratory_rate: float | None = None
    glucose_level: float | None = None
    oxygen_saturation: float | None = None
    diagnosed_for: str | None = None

    @field_validator("oxygen_saturation")
    @classmethod
    def validate_oxygen_saturation(cls, v: float | None) -> float | None:
        if v is not None and (v < 0 or v > 100):
            raise ValueError("Oxygen saturation must be between 0 and 100")
        return v


class ReadingResponse(BaseModel):
    id: UUID
    patient_id: UUID
    height: float | None
    weight: float | None
    temperature: float | None
    heart_rate: float | None
    bp_systolic: float | None
    bp_diastolic: float | None
    respiratory_rate: float | None
    glucose_level: float | None
    oxygen_saturation: float | None
    diagnosed_for: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReadingCount(BaseModel):
    count: int
