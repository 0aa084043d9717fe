# 📄 File: app/modules/plant_health/presentation/api/v1/plants.py
# 🧭 Purpose (Layman Explanation):
# Web endpoints for the user's plant collection: the home screen, saving a diagnosed
# plant, watering it, adding recovery photos and removing it.
#
# 🧪 Purpose (Technical Summary):
# FastAPI endpoints over PlantCareService. Every route takes the caller's Session from
# the bearer token; responses add the watering status label computed at request time.
#
# 🔗 Dependencies:
# - FastAPI router and status codes
# - app.modules.plant_health.presentation (dependencies, schemas)
#
# 🔄 Connected Modules / Calls From:
# - app.api.v1.router (mounted under /api/v1/plants)

import logging
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, status

from app.modules.plant_health.domain.models.user import Session
from app.modules.plant_health.domain.services.plant_care_service import PlantCareService
from app.modules.plant_health.presentation.api.schemas import (
    AddPhotoRequest,
    HomeResponse,
    MessageResponse,
    PlantResponse,
    SavePlantRequest,
)
from app.modules.plant_health.presentation.dependencies import (
    get_current_session,
    get_plant_care_service,
)
from app.shared.core.exceptions import StorageError
from app.shared.utils.logging import get_logger

logger = logging.getLogger(__name__)
audit_logger = get_logger("plant_health.audit")

plants_router = APIRouter()


def _now() -> datetime:
    return datetime.now(timezone.utc)


@plants_router.get("/home", response_model=HomeResponse, summary="Home dashboard")
async def home(
    session: Session = Depends(get_current_session),
    service: PlantCareService = Depends(get_plant_care_service),
) -> HomeResponse:
    dashboard = await service.load_home(session)
    return HomeResponse.from_dashboard(dashboard, _now())


@plants_router.get("", response_model=List[PlantResponse], summary="List plants, newest first")
async def list_plants(
    session: Session = Depends(get_current_session),
    service: PlantCareService = Depends(get_plant_care_service),
) -> List[PlantResponse]:
    plants = await service.list_plants(session)
    now = _now()
    return [PlantResponse.from_record(p, now) for p in plants]


@plants_router.post(
    "",
    response_model=PlantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a diagnosed plant",
    responses={402: {"description": "Free plant limit reached"}}
)
async def save_plant(
    request: SavePlantRequest,
    session: Session = Depends(get_current_session),
    service: PlantCareService = Depends(get_plant_care_service),
) -> PlantResponse:
    plant = await service.save_plant(
        session,
        name=request.name,
        questionnaire=request.questionnaire,
        diagnosis=request.diagnosis,
        image=request.image,
    )
    audit_logger.log_user_action("save_plant", user_id=session.email, resource=f"plant:{plant.id}")
    return PlantResponse.from_record(plant, _now())


@plants_router.get("/{plant_id}", response_model=PlantResponse, summary="Plant detail")
async def get_plant(
    plant_id: int,
    session: Session = Depends(get_current_session),
    service: PlantCareService = Depends(get_plant_care_service),
) -> PlantResponse:
    plant = await service.get_plant(session, plant_id)
    return PlantResponse.from_record(plant, _now())


@plants_router.post("/{plant_id}/water", response_model=PlantResponse, summary="Mark watered")
async def mark_watered(
    plant_id: int,
    session: Session = Depends(get_current_session),
    service: PlantCareService = Depends(get_plant_care_service),
) -> PlantResponse:
    plant = await service.mark_watered(session, plant_id)
    return PlantResponse.from_record(plant, _now())


@plants_router.post(
    "/{plant_id}/photos",
    response_model=PlantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a recovery photo",
    responses={402: {"description": "Free photo limit reached"}}
)
async def add_photo(
    plant_id: int,
    request: AddPhotoRequest,
    session: Session = Depends(get_current_session),
    service: PlantCareService = Depends(get_plant_care_service),
) -> PlantResponse:
    plant = await service.add_photo(session, plant_id, request.image, request.notes)
    return PlantResponse.from_record(plant, _now())


@plants_router.delete("/{plant_id}", response_model=MessageResponse, summary="Remove a plant")
async def delete_plant(
    plant_id: int,
    session: Session = Depends(get_current_session),
    service: PlantCareService = Depends(get_plant_care_service),
) -> MessageResponse:
    removed = await service.delete_plant(session, plant_id)
    if not removed:
        audit_logger.log_user_action(
            "delete_plant", user_id=session.email, resource=f"plant:{plant_id}", result="failed"
        )
        raise StorageError("Plant could not be deleted, please try again", operation="delete")
    audit_logger.log_user_action("delete_plant", user_id=session.email, resource=f"plant:{plant_id}")
    return MessageResponse(message="Plant deleted")
