"""
Shared FastAPI dependencies for dashboard routes.

Routes never see credentials: ``get_current_user`` resolves the session
cookie (or bearer token) to a user ID, and domain services receive only
that ID.
"""

import logging

from fastapi import Depends, HTTPException, Request, status

from lifeos.config import get_section
from lifeos.momentum.manager import MomentumManager, default_manager
from lifeos.security.session import validate_session
from lifeos.vault.manager import VaultManager


logger = logging.getLogger(__name__)

DEFAULT_COOKIE_NAME = "lifeos_session"


def get_security_config() -> dict:
    return get_section("dashboard").get("security") or {}


def get_session_token(request: Request, cookie_name: str = DEFAULT_COOKIE_NAME) -> str | None:
    """Session token from cookie or Authorization header."""
    token = request.cookies.get(cookie_name)
    if not token:
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header[7:]
    return token or None


async def get_current_user(
    request: Request, security_config: dict = Depends(get_security_config)
) -> dict:
    """
    Validate session and return current user.

    Raises 401 when no valid session is presented.
    """
    if not security_config.get("require_auth", True):
        # Single-user local mode
        return {"user_id": security_config.get("default_user", "local")}

    cookie_name = security_config.get("session_cookie_name", DEFAULT_COOKIE_NAME)
    token = get_session_token(request, cookie_name)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required"
        )

    result = validate_session(token, update_activity=True)
    if not result.get("valid"):
        reason = result.get("reason", "invalid_session")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=f"Session invalid: {reason}"
        )

    return {"user_id": result["user_id"], "session_id": result["session_id"]}


def get_momentum_manager() -> MomentumManager:
    return default_manager()


def get_vault_manager() -> VaultManager:
    config = get_section("vault")
    max_mb = config.get("max_upload_mb")
    return VaultManager(max_upload_bytes=int(max_mb * 1024 * 1024) if max_mb else None)


__all__ = [
    "get_current_user",
    "get_momentum_manager",
    "get_security_config",
    "get_session_token",
    "get_vault_manager",
]
