"""
Server-side counterpart of the reading submission form.

``ReadingForm`` keeps the values the doctor is editing, validates them in
one pass against ``READING_FIELD_RULES`` and hands valid submissions to the
reading repository. The outcome is a ``ReadingFormResult`` carrying either
per-field errors or a notification for the client's toast surface.
"""

import logging
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from smartmed.core.cache import CacheInvalidator, patient_reading_path
from smartmed.core.errors import ReadingServiceError
from smartmed.schemas.notification import Notification, NotificationAction
from smartmed.schemas.reading import ReadingCreate, ReadingResponse
from smartmed.schemas.reading_form import (
    READING_FORM_DEFAULTS,
    ReadingFormInput,
    form_errors,
)
from smartmed.services.reading_service import create_reading

logger = logging.getLogger(__name__)


class FormPendingError(RuntimeError):
    """Raised when a submit arrives while another is still in flight."""


class ReadingFormResult(BaseModel):
    ok: bool
    errors: dict[str, str] = {}
    notification: Notification | None = None
    reading: ReadingResponse | None = None


def submitted_notification(patient_id: UUID, reading_id: UUID) -> Notification:
    return Notification(
        kind="success",
        title="Reading submitted",
        description="The patient's medical reading has been saved successfully.",
        action=NotificationAction(
            label="View",
            href=patient_reading_path(patient_id, reading_id),
        ),
    )


def failed_notification() -> Notification:
    return Notification(
        kind="error",
        title="Error",
        description="There was a problem submitting the reading.",
    )


class ReadingForm:
    def __init__(self, patient_id: UUID, values: dict[str, Any] | None = None):
        self.patient_id = patient_id
        self.values: dict[str, Any] = dict(READING_FORM_DEFAULTS)
        if values:
            self.values.update(values)
        self.pending = False

    @classmethod
    def from_submission(cls, patient_id: UUID, values: dict[str, Any]) -> "ReadingForm":
        """
        Form holding exactly what the client sent. Omitted fields count as
        blank ("not measured"); the pre-filled defaults are display-only.
        """
        form = cls(patient_id)
        form.values = {field: "" for field in READING_FORM_DEFAULTS} | values
        return form

    def reset(self) -> None:
        self.values = dict(READING_FORM_DEFAULTS)

    def validate(self) -> tuple[ReadingFormInput | None, dict[str, str]]:
        try:
            return ReadingFormInput.model_validate(self.values), {}
        except ValidationError as exc:
            return None, form_errors(exc)

    def to_reading_create(self, data: ReadingFormInput) -> ReadingCreate:
        return ReadingCreate(
            patient_id=self.patient_id,
            diagnosed_for=data.notes,
            **data.measurements(),
        )

    def submit(self, db: Session, *, invalidator: CacheInvalidator) -> ReadingFormResult:
        if self.pending:
            raise FormPendingError("A reading submission is already in progress")

        data, errors = self.validate()
        if data is None:
            return ReadingFormResult(ok=False, errors=errors)

        self.pending = True
        try:
            reading = create_reading(
                db, self.to_reading_create(data), invalidator=invalidator
            )
        except ReadingServiceError as e:
            logger.error(
                f"Error submitting patient reading for patient {self.patient_id}: "
                f"{e.message} ({e.kind.value})"
            )
            return ReadingFormResult(ok=False, notification=failed_notification())
        finally:
            self.pending = False

        self.reset()
        return ReadingFormResult(
            ok=True,
            notification=submitted_notification(self.patient_id, reading.id),
            reading=ReadingResponse.model_validate(reading),
        )
