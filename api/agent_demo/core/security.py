"""
Security utilities for the Agent Demo API.

Administrators authenticate with a shared API key (header, bearer token, query
parameter or the session cookie set at login). Demo users are not authenticated
against an identity provider; they are identified by a stable, privacy-preserving
hash derived from their session cookie or request headers.
"""

import asyncio
import hashlib
import logging
import secrets
import uuid

from agent_demo.core.config import get_settings
from fastapi import HTTPException, Request, Response, status

# Minimum length for secure API keys
MIN_API_KEY_LENGTH = 24

ADMIN_COOKIE_NAME = "admin_authenticated"
DEMO_SESSION_COOKIE_NAME = "demo_session"

logger = logging.getLogger(__name__)

# Cryptographically secure random number generator for timing delays
secure_random = secrets.SystemRandom()


def _client_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def verify_admin_key_with_delay(provided_key: str, request: Request) -> bool:
    """Verify API key with timing attack resistance.

    Implements constant-time comparison with a random delay and deferred
    logging so that response timing does not leak the outcome.

    Args:
        provided_key: The API key to verify
        request: The FastAPI request object (for deferred logging)

    Returns:
        bool: True if the key is valid

    Raises:
        HTTPException: If admin access is not configured
    """
    admin_api_key = get_settings().ADMIN_API_KEY

    if not admin_api_key:
        await asyncio.sleep(secure_random.uniform(0.05, 0.15))
        logger.warning("Admin login attempted but ADMIN_API_KEY is not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin access not configured",
        )

    is_valid = secrets.compare_digest(provided_key, admin_api_key)

    # Random delay to prevent timing attacks (50-150ms)
    await asyncio.sleep(secure_random.uniform(0.05, 0.15))

    if not is_valid:
        logger.warning(f"Invalid admin credentials from {_client_host(request)}")
    elif len(admin_api_key) < MIN_API_KEY_LENGTH:
        logger.warning(
            f"Successful login with insecure admin key length: {len(provided_key)} chars"
        )
    else:
        logger.debug(f"Admin login granted from {_client_host(request)}")

    return is_valid


def verify_admin_key(provided_key: str) -> bool:
    """Verify that the provided API key is valid (synchronous version).

    Args:
        provided_key: The API key to verify

    Returns:
        bool: True if the key is valid

    Raises:
        HTTPException: If admin access is not configured
    """
    admin_api_key = get_settings().ADMIN_API_KEY

    if not admin_api_key:
        logger.warning("Admin access attempted but ADMIN_API_KEY is not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin access not configured",
        )

    if len(admin_api_key) < MIN_API_KEY_LENGTH:
        logger.warning(
            f"ADMIN_API_KEY is configured with insecure length: {len(admin_api_key)} (min: {MIN_API_KEY_LENGTH})"
        )

    return secrets.compare_digest(provided_key, admin_api_key)


def _extract_api_key(request: Request) -> str | None:
    authorization = request.headers.get("Authorization", "")
    bearer = (
        authorization.replace("Bearer ", "", 1)
        if authorization.startswith("Bearer ")
        else None
    )
    return (
        request.headers.get("X-API-KEY")
        or request.query_params.get("api_key")
        or bearer
    )


def verify_admin_access(request: Request) -> bool:
    """Verify that the request has admin access via cookie or API key.

    Used as a router-level dependency for every ``/admin`` route except login
    and logout.

    Args:
        request: The FastAPI request object

    Returns:
        bool: True if access is granted

    Raises:
        HTTPException: 401 when no credentials were sent, 403 when they are wrong
    """
    if request.cookies.get(ADMIN_COOKIE_NAME) == "true":
        logger.debug(f"Admin access granted via cookie from {_client_host(request)}")
        return True

    provided_key = _extract_api_key(request)
    if provided_key:
        if verify_admin_key(provided_key):
            logger.debug(f"Admin access granted via key from {_client_host(request)}")
            return True
        logger.warning(
            f"Invalid admin credentials provided from {_client_host(request)}"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin credentials",
        )

    logger.warning(f"Missing admin authentication from {_client_host(request)}")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED, detail="Admin authentication required"
    )


def set_admin_cookie(response: Response) -> None:
    """Set the HTTP-only admin session cookie.

    Args:
        response: FastAPI response object to set cookie on
    """
    settings = get_settings()
    response.set_cookie(
        key=ADMIN_COOKIE_NAME,
        value="true",
        max_age=settings.ADMIN_SESSION_MAX_AGE,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_admin_cookie(response: Response) -> None:
    """Clear admin authentication cookie.

    Args:
        response: FastAPI response object to clear cookie on
    """
    response.delete_cookie(key=ADMIN_COOKIE_NAME, path="/")


def _demo_user_id_from_token(token: str) -> str:
    digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
    return f"user_{digest[:24]}"


def derive_demo_user_id(request: Request) -> str:
    """Derive a stable, privacy-preserving demo user identifier.

    The ``demo_session`` cookie issued by ``ensure_demo_user_id`` wins when
    present; otherwise the forwarded-for address, client host and user agent
    are hashed together. Used as a FastAPI dependency by the demo routes.

    Returns:
        Identifier of the form ``user_<24 hex chars>``
    """
    session_cookie = request.cookies.get(DEMO_SESSION_COOKIE_NAME)
    if session_cookie and session_cookie.strip():
        token = session_cookie.strip()
    else:
        forwarded_for = request.headers.get("x-forwarded-for", "")
        client_host = request.client.host if request.client else ""
        user_agent = request.headers.get("user-agent", "")
        token = "|".join([forwarded_for, client_host, user_agent]).strip()
        if not token.replace("|", "").strip():
            token = str(uuid.uuid4())

    return _demo_user_id_from_token(token)


def ensure_demo_user_id(request: Request, response: Response) -> str:
    """Like ``derive_demo_user_id``, but issues a ``demo_session`` cookie first.

    Visitors without the cookie get a random token, so two browsers behind the
    same address no longer share an identity. Used when a chat is started.
    """
    session_cookie = request.cookies.get(DEMO_SESSION_COOKIE_NAME)
    if session_cookie and session_cookie.strip():
        return _demo_user_id_from_token(session_cookie.strip())

    token = secrets.token_urlsafe(32)
    settings = get_settings()
    response.set_cookie(
        key=DEMO_SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.DEMO_SESSION_MAX_AGE,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
    logger.debug(f"Issued demo session cookie to {_client_host(request)}")
    return _demo_user_id_from_token(token)
