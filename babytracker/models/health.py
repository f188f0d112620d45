"""Pydantic models for medications and symptom assessments."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from .base import CamelModel, LocalDatetime

Route = Literal["oral", "rectal", "nasal"]
UrgencyLevel = Literal["routine", "urgent", "emergency"]
Severity = Literal["mild", "moderate", "severe"]
SymptomCategory = Literal[
    "respiratory", "digestive", "fever", "skin", "behavioral", "neurological", "other"
]


# ── Medications ────────────────────────────────────────────────────────────


class MedicationForm(CamelModel):
    concentration: float
    unit: str = Field(..., description="e.g. 'mg/ml', 'mg', 'UI/drop'")
    name: str


class PediatricMedication(CamelModel):
    """Catalog entry describing how a medication is dosed for infants."""
    key: str
    name: str
    active_ingredient: str
    dosage_per_kg: Optional[float] = Field(None, description="Per dose, in the dose unit per kg")
    fixed_dose: Optional[float] = None
    dose_unit: str = "mg"
    max_daily_dosage: float = Field(..., description="Per kg when weight-based, absolute otherwise")
    frequency_hours: int
    max_doses: int
    min_age_weeks: int = 0
    routes: tuple[Route, ...]
    forms: dict[str, tuple[MedicationForm, ...]]
    warnings: tuple[str, ...] = ()


class DosageCalculation(CamelModel):
    medication: str
    dose: float = Field(..., description="Amount per dose, in ``dose_unit``")
    dose_unit: str = "mg"
    dose_volume_ml: Optional[float] = None
    form: Optional[MedicationForm] = None
    frequency_hours: int
    frequency: str
    max_daily: float
    max_doses: int
    warnings: tuple[str, ...] = ()


class MedicationEntryData(CamelModel):
    """A medication as entered on the health log form."""
    name: str = ""
    active_ingredient: str = ""
    dosage: str = ""
    unit: str = ""
    frequency: str = ""
    duration: str = ""
    reason: str = ""
    start_date: Optional[LocalDatetime] = None
    end_date: Optional[LocalDatetime] = None
    route: Optional[Route] = None
    weight: Optional[float] = Field(None, description="Grams at time of prescription")
    notes: Optional[str] = None


# ── Symptoms ───────────────────────────────────────────────────────────────


class SymptomDetail(CamelModel):
    name: str
    category: SymptomCategory = "other"
    severity: Severity = "mild"
    duration: str = ""
    description: Optional[str] = None
    onset: Literal["sudden", "gradual"] = "gradual"
    frequency: Optional[Literal["constant", "intermittent", "occasional"]] = None


class PhysicalExam(CamelModel):
    skin_color: Literal["normal", "pale", "flushed", "mottled", "jaundice"] = "normal"
    breathing: Literal["normal", "fast", "labored", "wheezing", "grunting"] = "normal"
    hydration: Literal[
        "normal", "mild_dehydration", "moderate_dehydration", "severe_dehydration"
    ] = "normal"


class SymptomAssessment(CamelModel):
    date: LocalDatetime = Field(default_factory=datetime.now)
    temperature: Optional[float] = Field(None, description="Degrees Celsius")
    symptoms: tuple[SymptomDetail, ...] = ()
    physical_exam: PhysicalExam = PhysicalExam()
    urgency_level: UrgencyLevel = "routine"
    doctor_contacted: bool = False
    notes: Optional[str] = None
