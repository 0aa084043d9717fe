# 📄 File: app/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# A quick checkup endpoint that tells monitoring tools whether the plant health app and
# its store are working.
# 🧪 Purpose (Technical Summary):
# Health check endpoint reporting service metadata, uptime, diagnosis API configuration
# and a Redis ping when the Redis backend is active.
# 🔗 Dependencies:
# FastAPI, app.shared.config.redis (check_redis_health), app.modules.plant_health.container
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, load balancers

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.shared.config.redis import check_redis_health

health_router = APIRouter()

_app_start_time = datetime.now(timezone.utc)


@health_router.get("/health", summary="Health Check")
async def health_check(request: Request) -> JSONResponse:
    container = request.app.state.container
    settings = container.settings

    checks = {
        "storage": {"backend": settings.STORAGE_BACKEND, "status": "healthy"},
        "diagnosis_api": {"configured": bool(settings.ANTHROPIC_API_KEY)},
    }
    if container.redis_config is not None:
        checks["storage"].update(
            await check_redis_health(container.redis_config.create_redis_client())
        )

    healthy = checks["storage"]["status"] == "healthy"
    now = datetime.now(timezone.utc)
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": now.isoformat(),
            "uptime_seconds": round((now - _app_start_time).total_seconds(), 1),
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "checks": checks,
        }
    )
