import uuid
from datetime import datetime, date

from sqlalchemy import (
    String,
    Date,
    DateTime,
    ForeignKey,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartmed.models.base import Base, utc_now
from smartmed.models.doctor import Doctor


class Patient(Base):
    """
    Patient owned by a doctor.

    NOTE:
    - Patients are managed elsewhere; this service reads name, dob and
      the owning doctor, and hangs readings/reports off the id.
    """

    __tablename__ = "patients"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    dob: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    doctor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("doctors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utc_now,
    )

    doctor: Mapped["Doctor"] = relationship("Doctor")
