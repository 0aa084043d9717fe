# 📄 File: app/modules/plant_health/domain/services/watering_service.py
# 🧭 Purpose (Layman Explanation):
# Works out when a plant should next be watered from how much light it gets and how wet
# its soil is, and turns that into friendly labels like "Water today" or "Overdue 2d".
# 🧪 Purpose (Technical Summary):
# Deterministic watering schedule calculator with no I/O: interval table by light
# condition, wet-soil extension, overdue-day arithmetic and status labelling.
# 🔗 Dependencies:
# datetime, math, domain models
# 🔄 Connected Modules / Calls From:
# plant repository (mark watered), plant_care_service.py (save, home dashboard), API schemas

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, List, Optional

from ..models.plant import LightCondition, PlantRecord, SoilCondition, WateringSchedule

DEFAULT_INTERVAL_DAYS = 7
WET_SOIL_EXTRA_DAYS = 3

# Soil is not re-asked when a plant is watered
WATERED_SOIL_ASSUMPTION = SoilCondition.SLIGHTLY_MOIST.value

LIGHT_INTERVAL_DAYS = {
    LightCondition.DIRECT_SUNLIGHT.value: 3,
    LightCondition.BRIGHT_INDIRECT.value: 5,
    LightCondition.LOW_LIGHT.value: 10,
}

WET_SOILS = frozenset({SoilCondition.VERY_WET.value, SoilCondition.SOGGY.value})

ONE_DAY_SECONDS = 86400


class WateringUrgency(str, Enum):
    OVERDUE = "overdue"
    TODAY = "today"
    TOMORROW = "tomorrow"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class WateringStatus:
    days: int
    urgency: WateringUrgency
    label: str


def watering_interval(light: Optional[str], soil: Optional[str]) -> int:
    """Days between waterings for a light/soil pair."""
    days = LIGHT_INTERVAL_DAYS.get(light or "", DEFAULT_INTERVAL_DAYS)
    if soil in WET_SOILS:
        days += WET_SOIL_EXTRA_DAYS
    return days


def next_watering(light: Optional[str], soil: Optional[str], now: datetime) -> datetime:
    return now + timedelta(days=watering_interval(light, soil))


def schedule_for(light: Optional[str], soil: Optional[str], now: datetime) -> WateringSchedule:
    """Schedule starting at now, used when a plant is first saved."""
    return WateringSchedule(last_watered=now, next_watering=next_watering(light, soil, now))


def schedule_after_watering(plant: PlantRecord, now: datetime) -> WateringSchedule:
    return schedule_for(plant.questionnaire.light_condition, WATERED_SOIL_ASSUMPTION, now)


def overdue_days(schedule: WateringSchedule, now: datetime) -> int:
    """
    Whole days until the next watering, rounded up.

    Negative values mean the plant is overdue by that many days.
    """
    delta = _as_utc(schedule.next_watering) - _as_utc(now)
    return math.ceil(delta.total_seconds() / ONE_DAY_SECONDS)


def watering_status(schedule: WateringSchedule, now: datetime) -> WateringStatus:
    days = overdue_days(schedule, now)
    if days < 0:
        return WateringStatus(days, WateringUrgency.OVERDUE, f"Overdue {abs(days)}d")
    if days == 0:
        return WateringStatus(days, WateringUrgency.TODAY, "Water today")
    if days == 1:
        return WateringStatus(days, WateringUrgency.TOMORROW, "Tomorrow")
    return WateringStatus(days, WateringUrgency.UPCOMING, f"In {days}d")


def overdue_plants(plants: Iterable[PlantRecord], now: datetime) -> List[PlantRecord]:
    return [p for p in plants if overdue_days(p.watering_schedule, now) < 0]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
