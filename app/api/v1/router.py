# 📄 File: app/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# Directs every version 1 request to the right place: sign-in requests to the auth
# handlers, plant requests to the plant handlers and so on.
# 🧪 Purpose (Technical Summary):
# Main API v1 router aggregating the health router and the plant_health module routers
# under their route prefixes.
# 🔗 Dependencies:
# FastAPI, app.api.v1.health, app.modules.plant_health.presentation.api.v1
# 🔄 Connected Modules / Calls From:
# app.main.py

import logging

from fastapi import APIRouter

from app.modules.plant_health.presentation.api.v1 import (
    auth_router,
    diagnoses_router,
    plants_router,
)

from . import ROUTE_PREFIXES, get_api_info
from .health import health_router

logger = logging.getLogger(__name__)

api_v1_router = APIRouter()

api_v1_router.include_router(health_router, tags=["Health Check"])

api_v1_router.include_router(auth_router, prefix=ROUTE_PREFIXES["auth"], tags=["Authentication"])
api_v1_router.include_router(plants_router, prefix=ROUTE_PREFIXES["plants"], tags=["Plants"])
api_v1_router.include_router(diagnoses_router, prefix=ROUTE_PREFIXES["diagnoses"], tags=["Diagnoses"])


@api_v1_router.get("/", summary="API v1 Information", tags=["API Info"])
async def api_v1_info() -> dict:
    return get_api_info()
