"""Field-level checks for forms; each returns ``{field: message}``, empty when valid."""

import re
from typing import Optional

from babytracker.models.baby import Baby
from babytracker.models.health import MedicationEntryData, SymptomAssessment

from .dosage import MEDICATIONS, MedicationNotAllowedError

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE = re.compile(r"^(?:\+33|0)[1-9](?:[\s.-]?\d{2}){4}$")

_MEDICATION_REQUIRED = {
    "name": "Medication name is required",
    "active_ingredient": "Active ingredient is required",
    "dosage": "Dosage is required",
    "unit": "Unit is required",
    "frequency": "Frequency is required",
    "duration": "Treatment duration is required",
    "reason": "Reason for treatment is required",
    "start_date": "Start date is required",
}


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL.match(email or ""))


def is_valid_phone(phone: str) -> bool:
    """French landline or mobile number, with optional separators."""
    return bool(_PHONE.match((phone or "").strip()))


def validate_baby(baby: Baby) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not baby.name.strip():
        errors["name"] = "Name is required"
    if baby.weight <= 0:
        errors["weight"] = "Weight must be positive"
    if baby.height <= 0:
        errors["height"] = "Height must be positive"
    return errors


def validate_medication_entry(
    data: MedicationEntryData,
    age_weeks: Optional[float] = None,
    medication_key: Optional[str] = None,
) -> dict[str, str]:
    errors = {
        field: message
        for field, message in _MEDICATION_REQUIRED.items()
        if not getattr(data, field)
    }
    if medication_key and medication_key in MEDICATIONS and age_weeks is not None:
        medication = MEDICATIONS[medication_key]
        if age_weeks < medication.min_age_weeks:
            errors["age"] = str(MedicationNotAllowedError(medication, age_weeks))
    return errors


def validate_symptom_assessment(assessment: SymptomAssessment) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not assessment.symptoms:
        errors["symptoms"] = "At least one symptom is required"
    for index, symptom in enumerate(assessment.symptoms):
        if not symptom.duration.strip():
            errors[f"symptom_{index}_duration"] = "Duration is required"
    return errors
