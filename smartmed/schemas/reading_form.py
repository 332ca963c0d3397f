"""
Validation rules for the reading submission form.

Every numeric field is described once in ``READING_FIELD_RULES`` and all of
them go through ``coerce_reading_value``: raw text in, ``float | None`` out.
Blank input means "not measured" and becomes ``None``; anything else has to
be a finite number and, where the rule carries a range, lie inside it.
"""

import math
from typing import Any

from pydantic import BaseModel, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError


class FieldRule(BaseModel):
    label: str
    display_label: str
    type: str = "number"
    nullable: bool = True
    optional: bool = False
    minimum: float | None = None
    maximum: float | None = None
    step: float | None = None
    placeholder: str | None = None

    model_config = {"frozen": True}

    @property
    def has_range(self) -> bool:
        return self.minimum is not None or self.maximum is not None

    @property
    def message(self) -> str:
        if self.minimum is not None and self.maximum is not None:
            return (
                f"{self.label} must be a number between "
                f"{self.minimum:g} and {self.maximum:g}"
            )
        if self.minimum is not None:
            return f"{self.label} must be a number of at least {self.minimum:g}"
        if self.maximum is not None:
            return f"{self.label} must be a number of at most {self.maximum:g}"
        return f"{self.label} must be a number"


READING_FIELD_RULES: dict[str, FieldRule] = {
    "bp_systolic": FieldRule(
        label="Systolic pressure",
        display_label="Blood Pressure (Systolic)",
        placeholder="120",
    ),
    "bp_diastolic": FieldRule(
        label="Diastolic pressure",
        display_label="Blood Pressure (Diastolic)",
        placeholder="80",
    ),
    "heart_rate": FieldRule(label="Heart rate", display_label="Heart Rate (bpm)"),
    "temperature": FieldRule(
        label="Temperature",
        display_label="Temperature (°C)",
        step=0.1,
    ),
    "oxygen_saturation": FieldRule(
        label="Oxygen saturation",
        display_label="Oxygen Saturation (%)",
        minimum=0,
        maximum=100,
    ),
    "respiratory_rate": FieldRule(
        label="Respiratory rate",
        display_label="Respiratory Rate (breaths/min)",
        optional=True,
    ),
    "weight": FieldRule(
        label="Weight",
        display_label="Weight (kg)",
        optional=True,
        step=0.1,
    ),
    "height": FieldRule(label="Height", display_label="Height (cm)", optional=True),
    "glucose_level": FieldRule(
        label="Glucose level",
        display_label="Glucose Level (mg/dL)",
        optional=True,
    ),
}

# Values the form is pre-filled with. They are only ever shown to the
# doctor; a field cleared before submitting is stored as "not measured".
READING_FORM_DEFAULTS: dict[str, str] = {
    "temperature": "37",
    "heart_rate": "72",
    "bp_systolic": "120",
    "bp_diastolic": "80",
    "oxygen_saturation": "98",
    "respiratory_rate": "",
    "glucose_level": "",
    "weight": "",
    "height": "",
    "notes": "",
}

_RADIX_PREFIXES = ("0x", "0o", "0b")


def _parse_number(text: str) -> float:
    lowered = text.lower()
    if "_" in text:
        raise ValueError(text)
    if lowered.startswith(_RADIX_PREFIXES):
        return float(int(lowered, 0))
    return float(text)


def coerce_reading_value(field: str, raw: Any) -> float | None:
    """
    Coerce one raw form value according to its rule.

    Raises PydanticCustomError carrying the field's user-facing message.
    """
    rule = READING_FIELD_RULES[field]

    if raw is None:
        return None

    if isinstance(raw, bool):
        raise PydanticCustomError("reading_number", rule.message)

    text = None if isinstance(raw, (int, float)) else str(raw).strip()
    if text == "":
        return None

    try:
        number = float(raw) if text is None else _parse_number(text)
    except (ValueError, OverflowError):
        raise PydanticCustomError("reading_number", rule.message) from None

    if not math.isfinite(number):
        raise PydanticCustomError("reading_number", rule.message)

    if rule.minimum is not None and number < rule.minimum:
        raise PydanticCustomError("reading_range", rule.message)
    if rule.maximum is not None and number > rule.maximum:
        raise PydanticCustomError("reading_range", rule.message)

    return number


class ReadingFormInput(BaseModel):
    """Raw form submission; numeric fields accept text or numbers."""

    height: float | None = None
    weight: float | None = None
    temperature: float | None = None
    heart_rate: float | None = None
    bp_systolic: float | None = None
    bp_diastolic: float | None = None
    respiratory_rate: float | None = None
    glucose_level: float | None = None
    oxygen_saturation: float | None = None
    notes: str | None = None

    @field_validator(*READING_FIELD_RULES, mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any, info: ValidationInfo) -> float | None:
        return coerce_reading_value(info.field_name, v)

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    def measurements(self) -> dict[str, float | None]:
        return {field: getattr(self, field) for field in READING_FIELD_RULES}


def form_errors(exc: ValidationError) -> dict[str, str]:
    """Flatten a ValidationError into ``{field: message}``, first error wins."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "__root__"
        errors.setdefault(field, err["msg"])
    return errors


class FieldDescription(BaseModel):
    name: str
    label: str
    type: str
    optional: bool
    minimum: float | None = None
    maximum: float | None = None
    step: float | None = None
    placeholder: str | None = None


class ReadingFormDescription(BaseModel):
    patient_id: str
    defaults: dict[str, str]
    fields: list[FieldDescription]


def describe_reading_form(patient_id) -> ReadingFormDescription:
    fields = [
        FieldDescription(
            name=name,
            label=rule.display_label,
            type=rule.type,
            optional=rule.optional,
            minimum=rule.minimum,
            maximum=rule.maximum,
            step=rule.step,
            placeholder=rule.placeholder,
        )
        for name, rule in READING_FIELD_RULES.items()
    ]
    fields.append(
        FieldDescription(
            name="notes",
            label="Clinical Notes",
            type="text",
            optional=True,
            placeholder="Add any additional notes or observations",
        )
    )
    return ReadingFormDescription(
        patient_id=str(patient_id),
        defaults=dict(READING_FORM_DEFAULTS),
        fields=fields,
    )
