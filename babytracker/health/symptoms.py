"""Symptom catalog and urgency triage."""

from collections.abc import Iterable
from typing import Optional

from babytracker.models.health import PhysicalExam, SymptomDetail, UrgencyLevel

# Names are kept in French: they are the labels stored with past assessments.
SYMPTOM_CATEGORIES: dict[str, dict] = {
    "respiratory": {
        "label": "Respiratory",
        "symptoms": {
            "Toux": "moderate",
            "Congestion nasale": "mild",
            "Respiration rapide": "urgent",
            "Respiration difficile": "emergency",
            "Sifflements": "urgent",
            "Apnée": "emergency",
        },
    },
    "digestive": {
        "label": "Digestive",
        "symptoms": {
            "Vomissements": "moderate",
            "Diarrhée": "moderate",
            "Constipation": "mild",
            "Refus de boire": "urgent",
            "Ballonnements": "mild",
            "Coliques": "mild",
        },
    },
    "fever": {
        "label": "Fever and temperature",
        "symptoms": {
            "Fièvre": "moderate",
            "Hypothermie": "emergency",
            "Frissons": "mild",
            "Transpiration": "mild",
        },
    },
    "skin": {
        "label": "Skin",
        "symptoms": {
            "Éruption cutanée": "moderate",
            "Jaunisse": "urgent",
            "Pâleur": "urgent",
            "Cyanose": "emergency",
            "Marbrures": "urgent",
            "Sécheresse": "mild",
        },
    },
    "behavioral": {
        "label": "Behavior",
        "symptoms": {
            "Irritabilité": "mild",
            "Léthargie": "urgent",
            "Troubles du sommeil": "mild",
            "Changement d'appétit": "mild",
            "Pleurs inconsolables": "moderate",
        },
    },
    "neurological": {
        "label": "Neurological",
        "symptoms": {
            "Convulsions": "emergency",
            "Somnolence excessive": "urgent",
            "Fontanelle bombée": "emergency",
            "Fontanelle creusée": "urgent",
            "Rigidité de la nuque": "emergency",
            "Trémulations": "moderate",
        },
    },
}

EMERGENCY_RED_FLAGS = frozenset({
    "Convulsions",
    "Apnée",
    "Respiration difficile",
    "Cyanose",
    "Fontanelle bombée",
    "Rigidité de la nuque",
    "Léthargie",
    "Hypothermie",
    "Pâleur",
})

NEONATAL_FEVER_WEEKS = 12
NEONATAL_FEVER_C = 38.0
HIGH_FEVER_C = 39.5
HYPOTHERMIA_C = 36.0

_RANK: dict[str, int] = {"routine": 0, "urgent": 1, "emergency": 2}


def escalate(current: UrgencyLevel, candidate: UrgencyLevel) -> UrgencyLevel:
    """The more severe of two levels; a level never goes back down."""
    return candidate if _RANK[candidate] > _RANK[current] else current


def category_of(symptom_name: str) -> str:
    for key, category in SYMPTOM_CATEGORIES.items():
        if symptom_name in category["symptoms"]:
            return key
    return "other"


def new_symptom(name: str, severity: str = "mild", duration: str = "") -> SymptomDetail:
    """A symptom picked from the catalog, with its category filled in."""
    return SymptomDetail(name=name, category=category_of(name), severity=severity, duration=duration)


def temperature_urgency(temperature: Optional[float], age_weeks: float) -> UrgencyLevel:
    if not temperature:
        return "routine"
    if age_weeks < NEONATAL_FEVER_WEEKS and temperature >= NEONATAL_FEVER_C:
        return "emergency"
    if temperature < HYPOTHERMIA_C:
        return "emergency"
    if temperature >= HIGH_FEVER_C:
        return "urgent"
    return "routine"


def assess_urgency(
    symptoms: Iterable[SymptomDetail],
    age_weeks: float,
    temperature: Optional[float] = None,
    physical_exam: Optional[PhysicalExam] = None,
) -> UrgencyLevel:
    """Triage level for a set of findings.

    Every rule can only raise the level, so the result does not depend on the
    order symptoms were entered in.
    """
    symptoms = list(symptoms)
    level: UrgencyLevel = "routine"

    if any(s.name in EMERGENCY_RED_FLAGS for s in symptoms):
        level = escalate(level, "emergency")
    if any(s.severity == "severe" for s in symptoms):
        level = escalate(level, "urgent")

    level = escalate(level, temperature_urgency(temperature, age_weeks))

    if physical_exam is not None and (
        physical_exam.skin_color == "pale" or physical_exam.breathing == "labored"
    ):
        level = escalate(level, "urgent")
    return level
