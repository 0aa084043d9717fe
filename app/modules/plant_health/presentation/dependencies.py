# 📄 File: app/modules/plant_health/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Gives every plant health endpoint the shared services and works out which signed-in
# user is calling from the token they send.
# 🧪 Purpose (Technical Summary):
# FastAPI dependencies resolving the ServiceContainer from app.state and the bearer token
# (python-jose HS256, subject = email) into an explicit Session value.
# 🔗 Dependencies:
# FastAPI, app.shared.core.security, app.modules.plant_health.container
# 🔄 Connected Modules / Calls From:
# app.modules.plant_health.presentation.api.v1.* endpoints

"""
Plant Health Module Dependencies

- get_container: the ServiceContainer built at startup
- get_current_session: Session for the bearer token on the request
- issue_token: bearer token for a freshly established Session
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.modules.plant_health.container import ServiceContainer
from app.modules.plant_health.domain.models.user import Session
from app.modules.plant_health.domain.services.plant_care_service import PlantCareService
from app.modules.plant_health.domain.services.session_service import SessionManager
from app.shared.core.exceptions import AuthenticationError
from app.shared.core.security import create_access_token, decode_access_token

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(auto_error=False)


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_session_manager(container: ServiceContainer = Depends(get_container)) -> SessionManager:
    return container.session_manager


def get_plant_care_service(container: ServiceContainer = Depends(get_container)) -> PlantCareService:
    return container.plant_care


def issue_token(session: Session) -> str:
    return create_access_token({"sub": session.email, "premium": session.is_premium})


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session_manager: SessionManager = Depends(get_session_manager),
) -> Session:
    """
    Resolve the bearer token to a Session.

    Premium status is re-read from the stored account rather than trusted
    from the token, so an upgrade takes effect without a new token.

    Raises:
        AuthenticationError: Missing, invalid or expired token, or the
            account no longer exists
    """
    if credentials is None:
        raise AuthenticationError("Authentication required")

    payload = decode_access_token(credentials.credentials)
    session = await session_manager.resolve_session(payload["sub"])
    if session is None:
        logger.warning(f"Token subject has no account: {payload['sub']}")
        raise AuthenticationError("Account not found for session token")
    return session
