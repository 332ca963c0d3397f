import uuid

import pytest

from smartmed.schemas.reading_form import READING_FORM_DEFAULTS
from smartmed.services.reading_form_service import FormPendingError, ReadingForm
from smartmed.services.reading_service import get_reading_by_id


def test_valid_submission_saves_and_resets(db, patient, invalidator):
    form = ReadingForm(
        patient.id,
        {"weight": "70.2", "glucose_level": "", "notes": "Mild cough"},
    )

    result = form.submit(db, invalidator=invalidator)

    assert result.ok
    assert result.errors == {}
    saved = get_reading_by_id(db, result.reading.id)
    assert saved.weight == 70.2
    assert saved.glucose_level is None
    assert saved.heart_rate == 72.0
    assert saved.diagnosed_for == "Mild cough"

    assert form.values == READING_FORM_DEFAULTS
    assert form.pending is False


def test_success_notification_links_to_new_reading(db, patient, invalidator):
    result = ReadingForm(patient.id).submit(db, invalidator=invalidator)

    notification = result.notification
    assert notification.kind == "success"
    assert notification.title == "Reading submitted"
    assert notification.action.label == "View"
    assert notification.action.href == (
        f"/dashboard/patients/{patient.id}/readings/{result.reading.id}"
    )


def test_cleared_fields_are_stored_as_not_measured(db, patient, invalidator):
    blanks = {field: "" for field in READING_FORM_DEFAULTS}
    result = ReadingForm(patient.id, blanks).submit(db, invalidator=invalidator)

    saved = get_reading_by_id(db, result.reading.id)
    assert saved.temperature is None
    assert saved.heart_rate is None
    assert saved.oxygen_saturation is None
    assert saved.diagnosed_for is None


def test_submission_never_fills_in_display_defaults(db, patient, invalidator):
    form = ReadingForm.from_submission(patient.id, {"heart_rate": "64"})

    result = form.submit(db, invalidator=invalidator)

    saved = get_reading_by_id(db, result.reading.id)
    assert saved.heart_rate == 64.0
    assert saved.temperature is None
    assert saved.bp_systolic is None
    assert saved.bp_diastolic is None
    assert saved.oxygen_saturation is None
    assert form.values == READING_FORM_DEFAULTS


def test_invalid_submission_returns_field_errors_and_saves_nothing(db, patient, invalidator):
    form = ReadingForm(patient.id, {"oxygen_saturation": "150", "heart_rate": "fast"})

    result = form.submit(db, invalidator=invalidator)

    assert not result.ok
    assert result.notification is None
    assert result.errors == {
        "oxygen_saturation": "Oxygen saturation must be a number between 0 and 100",
        "heart_rate": "Heart rate must be a number",
    }
    assert invalidator.calls == []
    assert form.values["heart_rate"] == "fast"


def test_repository_failure_yields_generic_notification(db, invalidator):
    form = ReadingForm(uuid.uuid4(), {"notes": "patient was deleted meanwhile"})

    result = form.submit(db, invalidator=invalidator)

    assert not result.ok
    assert result.errors == {}
    assert result.notification.kind == "error"
    assert result.notification.description == "There was a problem submitting the reading."
    assert "Failed" not in result.notification.description
    assert form.pending is False
    assert form.values["notes"] == "patient was deleted meanwhile"


def test_submit_while_pending_is_rejected(db, patient, invalidator):
    form = ReadingForm(patient.id)
    form.pending = True

    with pytest.raises(FormPendingError):
        form.submit(db, invalidator=invalidator)
