"""
Unit tests for the reading form rules:
- blank input means "not measured" (None), never 0
- numeric text is coerced to the number it spells
- oxygen saturation is range-checked
"""

import pytest
from pydantic import ValidationError

from smartmed.schemas.reading_form import (
    READING_FIELD_RULES,
    READING_FORM_DEFAULTS,
    ReadingFormInput,
    coerce_reading_value,
    describe_reading_form,
    form_errors,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("72", 72.0),
        ("36.6", 36.6),
        ("  98 ", 98.0),
        ("-3", -3.0),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("0x10", 16.0),
        (120, 120.0),
        (37.2, 37.2),
    ],
)
def test_numeric_text_coerces_to_its_value(raw, expected):
    assert coerce_reading_value("heart_rate", raw) == expected


@pytest.mark.parametrize("field", list(READING_FIELD_RULES))
@pytest.mark.parametrize("raw", ["", "   ", None])
def test_blank_is_none_for_every_field(field, raw):
    assert coerce_reading_value(field, raw) is None


def test_blank_heart_rate_is_not_zero():
    data = ReadingFormInput.model_validate({"heart_rate": ""})
    assert data.heart_rate is None


@pytest.mark.parametrize(
    "raw",
    ["abc", "12abc", "nan", "NaN", "Infinity", "inf", "1e400", "1_000", True],
)
def test_non_numbers_are_rejected_with_field_message(raw):
    with pytest.raises(ValidationError) as exc_info:
        ReadingFormInput.model_validate({"weight": raw})
    assert form_errors(exc_info.value) == {"weight": "Weight must be a number"}


@pytest.mark.parametrize("raw", ["0x" + "f" * 300, "0b" + "1" * 1100, 10**400])
def test_numbers_too_large_for_a_float_are_rejected(raw):
    with pytest.raises(ValidationError) as exc_info:
        ReadingFormInput.model_validate({"height": raw})
    assert form_errors(exc_info.value) == {"height": "Height must be a number"}


@pytest.mark.parametrize("raw", ["150", "-5", "100.01", 101])
def test_oxygen_saturation_outside_range_is_rejected(raw):
    with pytest.raises(ValidationError) as exc_info:
        ReadingFormInput.model_validate({"oxygen_saturation": raw})
    assert form_errors(exc_info.value) == {
        "oxygen_saturation": "Oxygen saturation must be a number between 0 and 100"
    }


@pytest.mark.parametrize("raw, expected", [("0", 0.0), ("100", 100.0), ("97.5", 97.5)])
def test_oxygen_saturation_range_is_inclusive(raw, expected):
    data = ReadingFormInput.model_validate({"oxygen_saturation": raw})
    assert data.oxygen_saturation == expected


def test_other_fields_have_no_physiological_bounds():
    data = ReadingFormInput.model_validate({"temperature": "-40", "heart_rate": "900"})
    assert data.temperature == -40.0
    assert data.heart_rate == 900.0


def test_all_field_errors_are_reported_together():
    with pytest.raises(ValidationError) as exc_info:
        ReadingFormInput.model_validate(
            {"height": "tall", "bp_systolic": "high", "oxygen_saturation": "150"}
        )
    errors = form_errors(exc_info.value)
    assert errors == {
        "height": "Height must be a number",
        "bp_systolic": "Systolic pressure must be a number",
        "oxygen_saturation": "Oxygen saturation must be a number between 0 and 100",
    }


def test_defaults_validate_to_assumed_normal_values():
    data = ReadingFormInput.model_validate(READING_FORM_DEFAULTS)
    assert data.temperature == 37.0
    assert data.heart_rate == 72.0
    assert data.bp_systolic == 120.0
    assert data.bp_diastolic == 80.0
    assert data.oxygen_saturation == 98.0
    assert data.weight is None
    assert data.height is None
    assert data.notes is None


def test_notes_are_trimmed_and_blank_notes_dropped():
    assert ReadingFormInput(notes="  chest pain  ").notes == "chest pain"
    assert ReadingFormInput(notes="   ").notes is None


def test_measurements_cover_every_numeric_field():
    data = ReadingFormInput.model_validate({"glucose_level": "110"})
    measurements = data.measurements()
    assert set(measurements) == set(READING_FIELD_RULES)
    assert measurements["glucose_level"] == 110.0


def test_describe_reading_form_lists_fields_and_defaults():
    description = describe_reading_form("p-1")
    names = [f.name for f in description.fields]
    assert names[-1] == "notes"
    assert set(names[:-1]) == set(READING_FIELD_RULES)
    spo2 = next(f for f in description.fields if f.name == "oxygen_saturation")
    assert (spo2.minimum, spo2.maximum) == (0, 100)
    assert description.defaults["heart_rate"] == "72"
