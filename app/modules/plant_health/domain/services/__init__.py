"""
Plant Health Domain Services

Session management, usage tracking, entitlements, watering schedules,
diagnosis orchestration and the plant care workflows built on them.
"""

from .diagnosis_service import (
    DiagnosisOrchestrator,
    DiagnosisOutcome,
    DiagnosisState,
    DiagnosisTransport,
    fallback_diagnosis,
)
from .entitlement_service import EntitlementDecision, EntitlementGate, GatedAction
from .plant_care_service import HomeDashboard, PlantCareService, PlantIdGenerator
from .session_service import SessionManager
from .usage_service import UsageTracker
from .watering_service import (
    WateringStatus,
    WateringUrgency,
    overdue_days,
    overdue_plants,
    watering_interval,
    watering_status,
)

__all__ = [
    "DiagnosisOrchestrator",
    "DiagnosisOutcome",
    "DiagnosisState",
    "DiagnosisTransport",
    "fallback_diagnosis",
    "EntitlementDecision",
    "EntitlementGate",
    "GatedAction",
    "HomeDashboard",
    "PlantCareService",
    "PlantIdGenerator",
    "SessionManager",
    "UsageTracker",
    "WateringStatus",
    "WateringUrgency",
    "overdue_days",
    "overdue_plants",
    "watering_interval",
    "watering_status",
]
