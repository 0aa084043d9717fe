"""
Plant Health Domain Models

User and Session, UsageStats with its effective-count projection, and the
PlantRecord aggregate with its questionnaire, diagnosis, photos and schedule.
"""

from .plant import (
    DEFAULT_PLANT_NAME,
    INITIAL_PHOTO_NOTES,
    SYMPTOMS,
    UPDATE_PHOTO_NOTES,
    Confidence,
    Diagnosis,
    LastWatered,
    LightCondition,
    PlantRecord,
    ProgressPhoto,
    Questionnaire,
    SoilCondition,
    WateringSchedule,
)
from .usage import UsageSnapshot, UsageStats, effective_count, same_calendar_month
from .user import Session, User

__all__ = [
    "DEFAULT_PLANT_NAME",
    "INITIAL_PHOTO_NOTES",
    "SYMPTOMS",
    "UPDATE_PHOTO_NOTES",
    "Confidence",
    "Diagnosis",
    "LastWatered",
    "LightCondition",
    "PlantRecord",
    "ProgressPhoto",
    "Questionnaire",
    "SoilCondition",
    "WateringSchedule",
    "UsageSnapshot",
    "UsageStats",
    "effective_count",
    "same_calendar_month",
    "Session",
    "User",
]
