# app/core/auth.py
import enum
from dataclasses import dataclass, field
from typing import Any, Dict

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt

from app.core.config import settings

# Tokens are minted by the external identity service; this app only verifies them.
bearer_scheme = HTTPBearer(auto_error=False)


class RoleName(str, enum.Enum):
    admin = "admin"
    editor = "editor"
    viewer = "viewer"


@dataclass(frozen=True)
class Principal:
    """Caller identity as carried by the bearer token (issued by the identity service)."""
    sub: str
    roles: frozenset[str] = field(default_factory=frozenset)


def decode_token(token: str) -> Dict[str, Any]:
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=["HS256"],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )


def _principal_from_token(token: str) -> Principal:
    payload = decode_token(token)
    sub = payload.get("sub")
    if not sub:
        raise jwt.InvalidTokenError("missing sub")
    roles = payload.get("roles") or []
    return Principal(sub=str(sub), roles=frozenset(str(r).lower() for r in roles))


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    if credentials is None:
        raise _unauthorized("not_authenticated")
    try:
        return _principal_from_token(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("invalid_token")

def require_role(*roles: str):
    allowed = {r.lower() for r in roles}
    async def dep(user: Principal = Depends(get_current_user)) -> Principal:
        if allowed and not (user.roles & allowed):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
        return user
    return dep

# Helpers
require_admin  = require_role(RoleName.admin.value)
require_staff  = require_role(RoleName.admin.value, RoleName.editor.value)

# ---------- Optional auth (public OR authenticated) ----------
def _extract_bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("authorization")
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None

async def optional_current_user(request: Request) -> Principal | None:
    """
    Returns the caller if a valid Bearer token is provided.
    Returns None if no/invalid token is provided (does NOT raise).
    """
    token = _extract_bearer_token(request)
    if not token:
        return None
    try:
        return _principal_from_token(token)
    except jwt.PyJWTError:
        # Treat bad token as anonymous (no raise)
        return None
