"""
Admin authentication routes for the Agent Demo API.
"""

import logging

from agent_demo.core.exceptions import AuthenticationError, BaseAppException
from agent_demo.core.security import (
    clear_admin_cookie,
    set_admin_cookie,
    verify_admin_key_with_delay,
)
from agent_demo.models.auth import AdminLoginRequest, AdminLoginResponse
from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import Response

logger = logging.getLogger(__name__)

# Login and logout stay reachable without credentials
router = APIRouter(
    prefix="/admin/auth",
    tags=["Admin Auth"],
    responses={
        401: {"description": "Unauthorized - Invalid or missing API key"},
    },
)


@router.post("/login", response_model=AdminLoginResponse)
async def admin_login(
    login_request: AdminLoginRequest, response: Response, request: Request
):
    """Authenticate an administrator and set the HTTP-only session cookie.

    The key comparison is constant-time and followed by a random delay, and
    nothing is logged before verification completes.

    Raises:
        AuthenticationError: If the key is wrong
        HTTPException: 503 if no admin key is configured
    """
    try:
        if await verify_admin_key_with_delay(login_request.api_key, request):
            set_admin_cookie(response)
            return AdminLoginResponse(message="Login successful", authenticated=True)
        raise AuthenticationError("Invalid credentials")
    except (BaseAppException, HTTPException):
        raise
    except Exception as e:
        logger.error(f"Admin login error: {e}", exc_info=True)
        raise BaseAppException(
            detail="Login failed",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="LOGIN_FAILED",
        ) from e


@router.post("/logout", response_model=AdminLoginResponse)
async def admin_logout(response: Response):
    """Clear the admin session cookie. No authentication is required."""
    logger.info("Admin logout")
    clear_admin_cookie(response)
    return AdminLoginResponse(message="Logout successful", authenticated=False)
