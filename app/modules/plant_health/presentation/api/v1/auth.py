# 📄 File: app/modules/plant_health/presentation/api/v1/auth.py
# 🧭 Purpose (Layman Explanation):
# Web endpoints for signing up, logging in and out, checking who is signed in and
# upgrading to premium.
#
# 🧪 Purpose (Technical Summary):
# FastAPI authentication endpoints over SessionManager. Sign-up and login return a signed
# bearer token; the other endpoints resolve the token to a Session.
#
# 🔗 Dependencies:
# - FastAPI router and status codes
# - app.modules.plant_health.presentation.dependencies
# - app.modules.plant_health.presentation.api.schemas
#
# 🔄 Connected Modules / Calls From:
# - app.api.v1.router (mounted under /api/v1/auth)

"""
Authentication API Endpoints

- POST /signup: create an account and sign it in
- POST /login: sign in an existing account
- POST /logout: clear the persisted current session
- GET /session: the session behind the bearer token
- GET /session/resume: the persisted "remember me" session, if any
- POST /upgrade: flip the account to premium
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from app.modules.plant_health.domain.models.user import Session
from app.modules.plant_health.domain.services.session_service import SessionManager
from app.modules.plant_health.presentation.api.schemas import (
    CredentialsRequest,
    MessageResponse,
    SessionResponse,
    TokenResponse,
)
from app.modules.plant_health.presentation.dependencies import (
    get_current_session,
    get_session_manager,
    issue_token,
)
from app.shared.utils.logging import get_logger

logger = logging.getLogger(__name__)
audit_logger = get_logger("plant_health.audit")

auth_router = APIRouter()


def _token_response(session: Session) -> TokenResponse:
    base = SessionResponse.from_session(session)
    return TokenResponse(user=base.user, started_at=base.started_at, access_token=issue_token(session))


@auth_router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create account",
    responses={
        409: {"description": "User exists, log in instead"},
        422: {"description": "Missing email or password, or password too short"},
    }
)
async def sign_up(
    credentials: CredentialsRequest,
    session_manager: SessionManager = Depends(get_session_manager),
) -> TokenResponse:
    session = await session_manager.sign_up(credentials.email, credentials.password)
    audit_logger.log_user_action("sign_up", user_id=session.email)
    return _token_response(session)


@auth_router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in",
    responses={
        401: {"description": "Incorrect password"},
        404: {"description": "No account, sign up instead"},
        422: {"description": "Missing email or password, or password too short"},
    }
)
async def log_in(
    credentials: CredentialsRequest,
    session_manager: SessionManager = Depends(get_session_manager),
) -> TokenResponse:
    session = await session_manager.log_in(credentials.email, credentials.password)
    audit_logger.log_user_action("log_in", user_id=session.email)
    return _token_response(session)


@auth_router.post("/logout", response_model=MessageResponse, summary="Log out")
async def log_out(
    session: Session = Depends(get_current_session),
    session_manager: SessionManager = Depends(get_session_manager),
) -> MessageResponse:
    await session_manager.log_out()
    audit_logger.log_user_action("log_out", user_id=session.email)
    return MessageResponse(message="Logged out")


@auth_router.get("/session", response_model=SessionResponse, summary="Current session")
async def current_session(session: Session = Depends(get_current_session)) -> SessionResponse:
    return SessionResponse.from_session(session)


@auth_router.get(
    "/session/resume",
    response_model=Optional[TokenResponse],
    summary="Resume the remembered session",
)
async def resume_session(
    session_manager: SessionManager = Depends(get_session_manager),
) -> Optional[TokenResponse]:
    session = await session_manager.current_session()
    if session is None:
        return None
    return _token_response(session)


@auth_router.post("/upgrade", response_model=TokenResponse, summary="Upgrade to premium")
async def upgrade(
    session: Session = Depends(get_current_session),
    session_manager: SessionManager = Depends(get_session_manager),
) -> TokenResponse:
    upgraded = await session_manager.upgrade_to_premium(session)
    audit_logger.log_business_event(
        "premium_upgrade",
        f"User {upgraded.email} upgraded to premium",
        entity_id=upgraded.email,
        entity_type="user",
    )
    return _token_response(upgraded)
