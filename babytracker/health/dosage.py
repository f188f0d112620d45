"""Pediatric dosage calculator.

Weight-based medications are dosed per kilogram and capped per day; fixed-dose
supplements (vitamin D) ignore the weight. Liquid forms labelled ``mg/ml`` or
``mg/Nml`` also get the volume to draw.
"""

import math
import re
from datetime import datetime, timedelta
from typing import Optional

from babytracker.models.health import DosageCalculation, MedicationForm, PediatricMedication


class MedicationNotAllowedError(ValueError):
    """The baby is younger than the medication's minimum age."""

    def __init__(self, medication: PediatricMedication, age_weeks: float):
        self.medication = medication
        self.age_weeks = age_weeks
        months = math.floor(medication.min_age_weeks / 4.33)
        super().__init__(f"{medication.name} is not allowed before {months} months")


def _forms(route: str, *forms: tuple[float, str, str]) -> tuple[str, tuple[MedicationForm, ...]]:
    return route, tuple(MedicationForm(concentration=c, unit=u, name=n) for c, u, n in forms)


MEDICATIONS: dict[str, PediatricMedication] = {
    "paracetamol": PediatricMedication(
        key="paracetamol",
        name="Paracetamol (Doliprane)",
        active_ingredient="paracetamol",
        dosage_per_kg=15,
        max_daily_dosage=60,
        frequency_hours=6,
        max_doses=4,
        min_age_weeks=0,
        routes=("oral", "rectal"),
        forms=dict([
            _forms("oral", (24, "mg/ml", "Suspension 2.4%"), (100, "mg/ml", "Suspension 10%")),
            _forms(
                "rectal",
                (80, "mg", "Suppository 80mg"),
                (150, "mg", "Suppository 150mg"),
                (300, "mg", "Suppository 300mg"),
            ),
        ]),
        warnings=(
            "Do not exceed the maximum daily dose",
            "Wait at least 6 hours between doses",
            "Keep monitoring body temperature",
        ),
    ),
    "ibuprofen": PediatricMedication(
        key="ibuprofen",
        name="Ibuprofen (Advil, Nurofen)",
        active_ingredient="ibuprofen",
        dosage_per_kg=10,
        max_daily_dosage=30,
        frequency_hours=8,
        max_doses=3,
        min_age_weeks=12,
        routes=("oral", "rectal"),
        forms=dict([
            _forms("oral", (20, "mg/ml", "Suspension 2%"), (40, "mg/ml", "Suspension 4%")),
            _forms("rectal", (60, "mg", "Suppository 60mg"), (125, "mg", "Suppository 125mg")),
        ]),
        warnings=(
            "Not before 3 months",
            "Give with food",
            "Watch for digestive side effects",
        ),
    ),
    "vitamin_d": PediatricMedication(
        key="vitamin_d",
        name="Vitamin D3 (Sterogyl, Zymad)",
        active_ingredient="cholecalciferol",
        fixed_dose=400,
        dose_unit="IU",
        max_daily_dosage=1000,
        frequency_hours=24,
        max_doses=1,
        min_age_weeks=2,
        routes=("oral",),
        forms=dict([
            _forms("oral", (200, "IU/drop", "Drops 200 IU/drop"), (400, "IU/ml", "Solution 400 IU/ml")),
        ]),
        warnings=(
            "Daily supplementation",
            "Recommended until 18 months",
        ),
    ),
    "salbutamol": PediatricMedication(
        key="salbutamol",
        name="Salbutamol (Ventolin)",
        active_ingredient="salbutamol",
        dosage_per_kg=0.15,
        max_daily_dosage=0.6,
        frequency_hours=6,
        max_doses=4,
        min_age_weeks=0,
        routes=("oral", "nasal"),
        forms=dict([
            _forms("oral", (2, "mg/5ml", "Syrup 2mg/5ml")),
            _forms("nasal", (100, "mcg/dose", "Inhaler 100mcg/dose")),
        ]),
        warnings=(
            "Use with a spacer chamber for infants",
            "May cause tremor or fast heart rate",
        ),
    ),
}

_LIQUID_UNIT = re.compile(r"^mg/(\d*(?:\.\d+)?)ml$")


def get_medication(key: str) -> PediatricMedication:
    try:
        return MEDICATIONS[key]
    except KeyError:
        raise KeyError(f"Unknown medication: {key}") from None


def available_medications(age_weeks: float) -> list[PediatricMedication]:
    """Catalog entries allowed at this age."""
    return [m for m in MEDICATIONS.values() if age_weeks >= m.min_age_weeks]


def check_age(medication: PediatricMedication, age_weeks: float) -> None:
    if age_weeks < medication.min_age_weeks:
        raise MedicationNotAllowedError(medication, age_weeks)


def _volume_ml(dose_mg: float, form: MedicationForm) -> Optional[float]:
    match = _LIQUID_UNIT.match(form.unit)
    if not match:
        return None
    per_ml = float(match.group(1) or 1)
    mg_per_ml = form.concentration / per_ml
    return round(dose_mg / mg_per_ml, 2)


def calculate_dosage(
    medication: str | PediatricMedication,
    weight_grams: float,
    route: Optional[str] = None,
    age_weeks: Optional[float] = None,
) -> DosageCalculation:
    """Dose for one administration.

    Raises ``MedicationNotAllowedError`` below the minimum age when
    ``age_weeks`` is given, and ``ValueError`` for a route the medication
    does not have.
    """
    med = get_medication(medication) if isinstance(medication, str) else medication
    if age_weeks is not None:
        check_age(med, age_weeks)
    route = route or med.routes[0]
    if route not in med.routes:
        raise ValueError(f"{med.name} cannot be given by the {route} route")

    weight_kg = weight_grams / 1000
    forms = med.forms.get(route, ())
    form = forms[0] if forms else None

    if med.dosage_per_kg is not None:
        dose = med.dosage_per_kg * weight_kg
        return DosageCalculation(
            medication=med.key,
            dose=round(dose, 2),
            dose_unit=med.dose_unit,
            dose_volume_ml=_volume_ml(dose, form) if form else None,
            form=form,
            frequency_hours=med.frequency_hours,
            frequency=f"every {med.frequency_hours}h",
            max_daily=round(med.max_daily_dosage * weight_kg, 2),
            max_doses=med.max_doses,
            warnings=med.warnings,
        )

    return DosageCalculation(
        medication=med.key,
        dose=med.fixed_dose or 0,
        dose_unit=med.dose_unit,
        form=med.forms.get("oral", (None,))[0],
        frequency_hours=med.frequency_hours,
        frequency="once a day",
        max_daily=med.max_daily_dosage,
        max_doses=med.max_doses,
        warnings=med.warnings,
    )


def parse_frequency(frequency: str) -> int:
    """Hours between doses from a free-text frequency ("every 8 hours", "twice daily")."""
    text = frequency.lower()
    hours = re.search(r"(\d+)\s*(?:h\b|hour|heure)", text)
    if hours:
        return int(hours.group(1))
    if "daily" in text or "day" in text or "jour" in text:
        if "twice" in text or "2 times" in text or "2 fois" in text:
            return 12
        if "three" in text or "thrice" in text or "3 times" in text or "3 fois" in text:
            return 8
        if "four" in text or "4 times" in text or "4 fois" in text:
            return 6
        return 24
    return 6


def next_dose_due(last_dose: datetime, frequency: str | int) -> datetime:
    hours = frequency if isinstance(frequency, int) else parse_frequency(frequency)
    return last_dose + timedelta(hours=hours)
