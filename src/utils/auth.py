"""
Authentication utilities for API endpoints
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import jwt
from fastapi import Depends, Header

from config.settings import ADMIN_ROLES, JWTConfig
from utils.errors import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass
class AuthUser:
    """Authenticated caller resolved from a bearer token"""
    user_id: Optional[str] = None
    handle: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    scopes: List[str] = field(default_factory=list)
    is_machine: bool = False


def decode_token(token: str) -> Dict[str, Any]:
    """
    Validate a bearer JWT and return its claims

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired or from an unknown issuer
    """
    jwt_config = JWTConfig.get_config()
    payload = jwt.decode(
        token,
        jwt_config["secret"],
        algorithms=jwt_config["allowed_algorithms"],
        options={"verify_aud": False}
    )
    if payload.get("iss") not in jwt_config["valid_issuers"]:
        raise jwt.InvalidIssuerError(f"Invalid issuer: {payload.get('iss')}")
    return payload


def build_auth_user(payload: Dict[str, Any]) -> AuthUser:
    """Map token claims to an AuthUser; roles live in a namespaced claim ending in 'roles'"""
    roles: List[str] = []
    for claim, value in payload.items():
        if claim.endswith("roles") and isinstance(value, list):
            roles = [str(role) for role in value]
            break

    scope = payload.get("scope") or ""
    scopes = scope.split() if isinstance(scope, str) else list(scope)
    is_machine = payload.get("gty") == "client-credentials"

    user_id = None
    handle = None
    for claim, value in payload.items():
        if claim.endswith("userId"):
            user_id = str(value)
        elif claim.endswith("handle"):
            handle = str(value)

    return AuthUser(
        user_id=user_id or payload.get("sub"),
        handle=handle,
        roles=roles,
        scopes=scopes,
        is_machine=is_machine
    )


async def get_auth_user(authorization: Optional[str] = Header(None)) -> Optional[AuthUser]:
    """
    FastAPI dependency for optional JWT Bearer authentication.

    Returns None for anonymous callers; a malformed or invalid token is still rejected.

    Raises:
        UnauthorizedError: 401 if a supplied token fails validation
    """
    if not authorization:
        return None

    if not authorization.startswith("Bearer "):
        logger.warning("AUTH: Invalid Authorization header format - returning 401")
        raise UnauthorizedError("Invalid authorization header format. Expected 'Bearer <token>'")

    token = authorization[7:]  # Remove "Bearer " prefix
    try:
        payload = decode_token(token)
    except jwt.InvalidTokenError as e:
        logger.warning(f"AUTH: Invalid JWT token: {str(e)}")
        raise UnauthorizedError("Invalid token")

    auth_user = build_auth_user(payload)
    logger.debug(f"AUTH: Authenticated {'machine' if auth_user.is_machine else 'user'} {auth_user.handle or auth_user.user_id}")
    return auth_user


def is_admin(auth_user: Optional[AuthUser]) -> bool:
    """Machine tokens and users holding an admin role are admins"""
    if auth_user is None:
        return False
    if auth_user.is_machine:
        return True
    admin_roles = {role.lower() for role in ADMIN_ROLES}
    return any(role.lower() in admin_roles for role in auth_user.roles)


def require_access(roles: List[str], scopes: List[str]):
    """
    Build a dependency that requires a token with one of ``roles`` (users)
    or one of ``scopes`` (machine tokens)
    """
    async def dependency(auth_user: Optional[AuthUser] = Depends(get_auth_user)) -> AuthUser:
        if auth_user is None:
            raise UnauthorizedError("No token provided.")

        if auth_user.is_machine:
            if not set(auth_user.scopes) & set(scopes):
                logger.warning(f"AUTH: Machine token lacks scopes {scopes}")
                raise ForbiddenError()
        else:
            wanted = {role.lower() for role in roles}
            if not any(role.lower() in wanted for role in auth_user.roles):
                logger.warning(f"AUTH: User {auth_user.handle} lacks roles {roles}")
                raise ForbiddenError()

        return auth_user

    return dependency
