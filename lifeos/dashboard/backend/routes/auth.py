"""
Dashboard Authentication Routes

Provides endpoints for session-based authentication:
- POST /api/auth/login  - Authenticate with the household master key
- POST /api/auth/logout - Destroy session
- GET  /api/auth/check  - Validate current session
"""

import hmac
import logging
import os

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from lifeos.dashboard.backend.dependencies import get_security_config, get_session_token
from lifeos.dashboard.backend.models import AuthStatus, LoginRequest
from lifeos.security.session import create_session, revoke_session, validate_session


logger = logging.getLogger(__name__)

router = APIRouter()

COOKIE_MAX_AGE = 86400  # 24 hours
MASTER_KEY_ENV = "LIFEOS_MASTER_KEY"


def _cookie_name(security_config: dict) -> str:
    return security_config.get("session_cookie_name", "lifeos_session")


@router.post("/login")
async def login(
    request: LoginRequest,
    response: Response,
    security_config: dict = Depends(get_security_config),
):
    """
    Authenticate using the master key.

    Returns a session cookie on success.
    """
    master_key = os.environ.get(MASTER_KEY_ENV, "")

    if not master_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Authentication not configured. Set {MASTER_KEY_ENV}.",
        )

    if not hmac.compare_digest(request.password.encode(), master_key.encode()):
        logger.warning(f"Failed login for {request.user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    session_result = create_session(user_id=request.user_id)
    if not session_result.get("success"):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create session",
        )

    response.set_cookie(
        key=_cookie_name(security_config),
        value=session_result["token"],
        max_age=COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=security_config.get("secure_cookies", False),
    )

    return {"success": True, "user_id": request.user_id, "token": session_result["token"]}


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    security_config: dict = Depends(get_security_config),
):
    """Revoke the session and clear the cookie."""
    cookie_name = _cookie_name(security_config)
    token = get_session_token(request, cookie_name)
    if token:
        revoke_session(token)
    response.delete_cookie(key=cookie_name)
    return {"success": True}


@router.get("/check", response_model=AuthStatus)
async def check_auth(request: Request, security_config: dict = Depends(get_security_config)):
    """Check if current session is valid."""
    token = get_session_token(request, _cookie_name(security_config))
    if not token:
        return AuthStatus(authenticated=False)

    result = validate_session(token, update_activity=True)
    if result.get("valid"):
        return AuthStatus(authenticated=True, user_id=result.get("user_id"))

    return AuthStatus(authenticated=False)
