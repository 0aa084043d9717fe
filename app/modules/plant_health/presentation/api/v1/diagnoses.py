# 📄 File: app/modules/plant_health/presentation/api/v1/diagnoses.py
# 🧭 Purpose (Layman Explanation):
# Web endpoint that takes a plant photo and the questionnaire answers and returns what
# the AI thinks is wrong with the plant.
#
# 🧪 Purpose (Technical Summary):
# FastAPI diagnosis endpoint over PlantCareService.request_diagnosis. Transport and
# malformed-response failures come back as a 200 with state "failed" and the fallback
# diagnosis; only quota and storage problems are HTTP errors.
#
# 🔗 Dependencies:
# - FastAPI router
# - app.modules.plant_health.presentation (dependencies, schemas)
#
# 🔄 Connected Modules / Calls From:
# - app.api.v1.router (mounted under /api/v1/diagnoses)

import logging

from fastapi import APIRouter, Depends

from app.modules.plant_health.domain.models.user import Session
from app.modules.plant_health.domain.services.plant_care_service import PlantCareService
from app.modules.plant_health.presentation.api.schemas import DiagnosisRequest, DiagnosisResponse
from app.modules.plant_health.presentation.dependencies import (
    get_current_session,
    get_plant_care_service,
)

logger = logging.getLogger(__name__)

diagnoses_router = APIRouter()


@diagnoses_router.post(
    "",
    response_model=DiagnosisResponse,
    summary="Diagnose a plant photo",
    responses={402: {"description": "Free plant or monthly diagnosis limit reached"}}
)
async def request_diagnosis(
    request: DiagnosisRequest,
    session: Session = Depends(get_current_session),
    service: PlantCareService = Depends(get_plant_care_service),
) -> DiagnosisResponse:
    outcome = await service.request_diagnosis(
        session,
        image=request.image,
        plant_name=request.plant_name,
        questionnaire=request.questionnaire,
    )
    return DiagnosisResponse.from_outcome(outcome)
