# LearnHub/Backend/src/security/security.py
# -*- coding: utf-8 -*-
"""security.security
~~~~~~~~~~~~~~~~~~~~
JWT helpers and role-based access checks.

Key points
==========
* Uses *python-jose* for compact JWS handling.
* Exports **create_access_token**, **verify_token**, **require_roles**
  (a FastAPI dependency factory) and **get_current_user**.
* The exam engine only needs a verified ``{sub, role}`` pair; ownership of
  attempts is checked by the services themselves.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from fastapi import HTTPException, Request, status
from jose import JWTError, jwt

from src.config.logger import configure_logger
from src.config.settings import settings
from src.domain.enums import Role

logger = configure_logger(__name__)

# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------

ACCESS_TOKEN_SECRET = settings.jwt_secret


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta
        if expires_delta is not None
        else timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "token_type": "access"})
    if "sub" in to_encode and not isinstance(to_encode["sub"], str):
        to_encode["sub"] = str(to_encode["sub"])
    if isinstance(to_encode.get("role"), Role):
        to_encode["role"] = to_encode["role"].value
    return jwt.encode(to_encode, ACCESS_TOKEN_SECRET, algorithm=settings.jwt_algorithm)


def verify_token(token: str, expected_type: str = "access") -> dict:
    try:
        payload = jwt.decode(
            token, ACCESS_TOKEN_SECRET, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as exc:
        logger.error(f"JWT verification failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    token_type = payload.get("token_type")
    if token_type != expected_type:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Wrong token type. Expected {expected_type}, got {token_type}",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


# ---------------------------------------------------------------------------
# Role-based checks
# ---------------------------------------------------------------------------


def _extract_token(request: Request) -> str:
    auth: str | None = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth.split(" ", 1)[1]


def require_roles(*allowed_roles: Role) -> Callable[[Request], dict]:
    allowed: set[Role] = set(allowed_roles)

    async def checker(request: Request) -> dict:
        payload = verify_token(_extract_token(request), "access")
        try:
            role = Role(payload["role"])
        except (KeyError, ValueError) as exc:
            logger.error(f"Invalid role in token payload: {payload}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token payload",
            ) from exc

        if role not in allowed:
            logger.warning(
                f"Access denied: user {payload.get('sub')} with role {role.value} "
                f"requested {request.url.path}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions"
            )

        return payload

    return checker


# Presets --------------------------------------------------------------------

admin_only = require_roles(Role.ADMIN)

authenticated = require_roles(Role.ADMIN, Role.TEACHER, Role.STUDENT)

admin_or_teacher = require_roles(Role.ADMIN, Role.TEACHER)


def get_current_user(request: Request) -> dict:
    """
    Decode the bearer token of the current request.

    Args:
        request: FastAPI request

    Returns:
        Token payload with ``sub`` and ``role``

    Raises:
        HTTPException: If the token is missing or invalid
    """
    return verify_token(_extract_token(request), "access")
