# 📄 File: app/modules/plant_health/domain/models/plant.py
# 🧭 Purpose (Layman Explanation):
# Describes a saved plant: what the user told us about it, what the AI thought was wrong,
# the photos taken while it recovers, and when it next needs water.
# 🧪 Purpose (Technical Summary):
# Domain models for Questionnaire, Diagnosis, ProgressPhoto, WateringSchedule and
# PlantRecord, persisted as flat camelCase JSON under plant:<email>:<id>.
# 🔗 Dependencies:
# pydantic, datetime, enum
# 🔄 Connected Modules / Calls From:
# diagnosis_service.py, watering_service.py, plant repository, plant_care_service.py

from datetime import datetime, timezone
from enum import Enum
from typing import List

from pydantic import Field, field_validator

from .user import CamelModel

DEFAULT_PLANT_NAME = "My Plant"
INITIAL_PHOTO_NOTES = "Initial"
UPDATE_PHOTO_NOTES = "Update"


class LightCondition(str, Enum):
    """Light options offered by the questionnaire"""
    DIRECT_SUNLIGHT = "Direct sunlight"
    BRIGHT_INDIRECT = "Bright indirect"
    MEDIUM_LIGHT = "Medium light"
    LOW_LIGHT = "Low light"


class SoilCondition(str, Enum):
    """Soil options offered by the questionnaire"""
    BONE_DRY = "Bone dry"
    SLIGHTLY_MOIST = "Slightly moist"
    VERY_WET = "Very wet"
    SOGGY = "Soggy/waterlogged"


class LastWatered(str, Enum):
    TODAY = "Today"
    ONE_TWO_DAYS = "1-2 days ago"
    THREE_FIVE_DAYS = "3-5 days ago"
    ONE_WEEK = "1 week ago"
    TWO_PLUS_WEEKS = "2+ weeks ago"


SYMPTOMS = (
    "Yellow leaves", "Brown spots", "Wilting", "Drooping", "Leaf drop", "Brown tips",
    "Curling leaves", "White residue", "Holes", "Sticky", "Slow growth", "Roots",
)


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Questionnaire(CamelModel):
    """
    Symptom questionnaire answered before a diagnosis.

    Free-form strings are accepted for every field; the enums above only
    name the options the client offers.
    """

    last_watered: str = ""
    recent_changes: str = ""
    soil_condition: str = ""
    light_condition: str = ""
    symptoms: List[str] = Field(default_factory=list)

    @field_validator('symptoms')
    @classmethod
    def dedupe_symptoms(cls, v: List[str]) -> List[str]:
        seen = []
        for symptom in v:
            symptom = symptom.strip()
            if symptom and symptom not in seen:
                seen.append(symptom)
        return seen


class Diagnosis(CamelModel):
    """Structured diagnosis returned by the diagnosis API"""

    primary_diagnosis: str = Field(min_length=1)
    confidence: Confidence
    explanation: str
    causes: List[str]
    treatment: List[str]
    timeline: str
    prevention: List[str]

    @field_validator('confidence', mode='before')
    @classmethod
    def normalize_confidence(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ProgressPhoto(CamelModel):
    image: str
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    notes: str = UPDATE_PHOTO_NOTES


class WateringSchedule(CamelModel):
    last_watered: datetime
    next_watering: datetime


class PlantRecord(CamelModel):
    """
    A saved plant owned by exactly one user.

    The diagnosis and questionnaire are fixed once saved; watering events
    replace the schedule and photo additions append to ``progress_photos``.
    """

    id: int
    name: str = DEFAULT_PLANT_NAME
    questionnaire: Questionnaire
    diagnosis: Diagnosis
    progress_photos: List[ProgressPhoto] = Field(default_factory=list)
    watering_schedule: WateringSchedule
    date_added: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator('name')
    @classmethod
    def default_name(cls, v: str) -> str:
        return v.strip() or DEFAULT_PLANT_NAME

    @property
    def photo_count(self) -> int:
        return len(self.progress_photos)
