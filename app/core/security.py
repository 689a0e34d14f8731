"""
Bearer token verification and FastAPI dependencies for authorization.

Tokens are issued by the wider student portal; this service only checks
their signature and reads the subject and roles.
"""
from dataclasses import dataclass, field
from typing import Annotated, List
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core import config


security = HTTPBearer()


@dataclass(frozen=True)
class Principal:
    """The caller identified by a verified token."""
    subject: str
    roles: List[str] = field(default_factory=list)
    is_admin: bool = False


def verify_jwt_token(token: str) -> dict:
    """
    Verify a JWT token and return its payload.
    
    Raises:
        HTTPException: If verification is not configured, or the token is invalid or expired
    """
    if not config.JWT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Token verification is not configured",
        )
    try:
        return jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> Principal:
    """
    Get the caller from the bearer token.
    
    Usage:
        @router.get("/roles")
        async def list_roles(principal: Principal = Depends(get_current_principal)):
            ...
    """
    payload = verify_jwt_token(credentials.credentials)
    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    return Principal(
        subject=str(payload["sub"]),
        roles=list(roles),
        is_admin=bool(payload.get("is_admin")) or config.ADMIN_ROLE in roles,
    )


async def get_current_admin(
    principal: Annotated[Principal, Depends(get_current_principal)]
) -> Principal:
    """Require admin privileges."""
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return principal


def get_authorization_header(request) -> str:
    """
    Extract authorization header for rate limiting.
    Used with slowapi Limiter.
    """
    auth = request.headers.get("Authorization", "")
    return auth or "anonymous"
