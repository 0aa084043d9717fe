# 📄 File: app/modules/plant_health/presentation/api/schemas.py
# 🧭 Purpose (Layman Explanation):
# Defines the shape of the data the app sends and receives: sign-up forms, plant details,
# diagnosis requests and the home screen summary.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas for the plant health endpoints. Responses reuse the
# camelCase domain records and add derived fields such as the watering status label.
#
# 🔗 Dependencies:
# - pydantic for schema validation and serialization
# - app.modules.plant_health.domain (models, watering calculator)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plant_health.presentation.api.v1 (auth, plants, diagnoses endpoints)

"""
Plant Health API Schemas

Request Schemas:
- CredentialsRequest: sign-up and login
- SavePlantRequest: save a diagnosed plant
- AddPhotoRequest: add a recovery photo
- DiagnosisRequest: photo plus questionnaire

Response Schemas:
- SessionResponse / TokenResponse: authenticated user
- PlantResponse: plant record with its watering status
- HomeResponse: home screen dashboard
- DiagnosisResponse: diagnosis outcome
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.modules.plant_health.domain.models import (
    Diagnosis,
    PlantRecord,
    ProgressPhoto,
    Questionnaire,
    Session,
    WateringSchedule,
)
from app.modules.plant_health.domain.services.diagnosis_service import DiagnosisOutcome
from app.modules.plant_health.domain.services.plant_care_service import HomeDashboard
from app.modules.plant_health.domain.services.watering_service import watering_status


class APISchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class CredentialsRequest(APISchema):
    """Email and password for sign-up or login. Length rules are enforced by the session manager."""

    email: str = Field(default="", description="Account email")
    password: str = Field(default="", description="Account password")


class SavePlantRequest(APISchema):
    name: Optional[str] = Field(default=None, description="Plant name, defaults to 'My Plant'")
    image: str = Field(..., min_length=1, description="Base64 image or data URL")
    questionnaire: Questionnaire
    diagnosis: Diagnosis


class AddPhotoRequest(APISchema):
    image: str = Field(..., min_length=1, description="Base64 image or data URL")
    notes: Optional[str] = Field(default=None, max_length=500)


class DiagnosisRequest(APISchema):
    image: str = Field(..., min_length=1, description="Base64 image or data URL")
    plant_name: str = Field(default="")
    questionnaire: Questionnaire = Field(default_factory=Questionnaire)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class UserResponse(APISchema):
    email: str
    is_premium: bool
    created_at: datetime


class SessionResponse(APISchema):
    user: UserResponse
    started_at: datetime

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(
            user=UserResponse(
                email=session.user.email,
                is_premium=session.user.is_premium,
                created_at=session.user.created_at,
            ),
            started_at=session.started_at,
        )


class TokenResponse(SessionResponse):
    access_token: str
    token_type: str = "bearer"


class MessageResponse(APISchema):
    message: str


class PlantResponse(APISchema):
    id: int
    name: str
    questionnaire: Questionnaire
    diagnosis: Diagnosis
    progress_photos: List[ProgressPhoto]
    watering_schedule: WateringSchedule
    date_added: datetime
    days_until_watering: int
    watering_label: str

    @classmethod
    def from_record(cls, plant: PlantRecord, now: datetime) -> "PlantResponse":
        status = watering_status(plant.watering_schedule, now)
        return cls(
            **plant.model_dump(),
            days_until_watering=status.days,
            watering_label=status.label,
        )


class HomeResponse(APISchema):
    plants: List[PlantResponse]
    overdue: List[PlantResponse]
    diagnoses_this_month: int
    diagnoses_remaining: Optional[int]
    plants_remaining: Optional[int]
    is_premium: bool

    @classmethod
    def from_dashboard(cls, dashboard: HomeDashboard, now: datetime) -> "HomeResponse":
        return cls(
            plants=[PlantResponse.from_record(p, now) for p in dashboard.plants],
            overdue=[PlantResponse.from_record(p, now) for p in dashboard.overdue],
            diagnoses_this_month=dashboard.diagnoses_this_month,
            diagnoses_remaining=dashboard.diagnoses_remaining,
            plants_remaining=dashboard.plants_remaining,
            is_premium=dashboard.is_premium,
        )


class DiagnosisResponse(APISchema):
    state: str
    diagnosis: Diagnosis
    error_code: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: DiagnosisOutcome) -> "DiagnosisResponse":
        return cls(
            state=outcome.state.value,
            diagnosis=outcome.diagnosis,
            error_code=outcome.error.error_code if outcome.error else None,
        )
