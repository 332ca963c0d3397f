import uuid
from datetime import datetime

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartmed.models.base import Base, utc_now
from smartmed.models.patient import Patient


class Reading(Base):
    """
    A point-in-time set of vital signs recorded for a patient.
    Append-only: readings are created and deleted, never edited.
    """

    __tablename__ = "readings"

    # Primary Key
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Foreign Keys
    patient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Vital Signs
    height: Mapped[float | None] = mapped_column(Float, nullable=True, doc="cm")
    weight: Mapped[float | None] = mapped_column(Float, nullable=True, doc="kg")
    temperature: Mapped[float | None] = mapped_column(Float, nullable=True, doc="°C")
    heart_rate: Mapped[float | None] = mapped_column(Float, nullable=True, doc="bpm")
    bp_systolic: Mapped[float | None] = mapped_column(Float, nullable=True)
    bp_diastolic: Mapped[float | None] = mapped_column(Float, nullable=True)
    respiratory_rate: Mapped[float | None] = mapped_column(
        Float, nullable=True, doc="breaths/min"
    )
    glucose_level: Mapped[float | None] = mapped_column(
        Float, nullable=True, doc="mg/dL"
    )
    oxygen_saturation: Mapped[float | None] = mapped_column(
        Float, nullable=True, doc="SpO2 %, 0-100"
    )

    # Notes
    diagnosed_for: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utc_now,
    )

    patient: Mapped["Patient"] = relationship("Patient")
