"""
Bearer token authentication and role checks.

Tokens are issued by the identity provider and verified here with the
shared secret. `sub` is the user ID and `role` the user's role.

Dependencies: PyJWT, fastapi, docingest.configs
System role: Request authentication and per-route authorization
"""

import enum
import logging
from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from docingest.configs import get_settings

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller."""

    user_id: str
    role: UserRole


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str) -> Principal:
    """
    Verify a bearer token and build the caller's principal.

    Raises:
        HTTPException(401): Expired, malformed or incomplete token
    """
    auth_config = get_settings().auth
    try:
        payload = jwt.decode(token, auth_config.secret, algorithms=[auth_config.algorithm])
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError:
        raise _unauthorized("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Token has no subject")
    try:
        role = UserRole(payload.get("role"))
    except ValueError:
        raise _unauthorized("Token has no valid role")
    return Principal(user_id=str(user_id), role=role)


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Principal:
    """Extract the caller from the Authorization header."""
    if not credentials:
        raise _unauthorized("Authentication required")
    return decode_token(credentials.credentials)


def require_roles(*roles: UserRole):
    """
    Build a dependency that admits only the given roles.

    Usage:
        @router.post("/start/{id}")
        async def start(principal: Principal = Depends(require_roles(UserRole.ADMIN))):
            ...
    """

    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in roles:
            logger.warning(
                f"{__name__}:require_roles - Role {principal.role.value} rejected",
                extra={"user_id": principal.user_id},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role for this operation",
            )
        return principal

    return dependency


require_ingestion_roles = require_roles(UserRole.ADMIN, UserRole.EDITOR)
