"""
Identity Collaborator - Resolves a request's bearer token to a caller

Tokens are issued by the external identity provider (a Supabase-style JWT:
`sub` is the user id, the role lives in user_metadata / app_metadata). This
module only verifies them; it never issues or refreshes sessions.

The resolved CallerContext is passed explicitly into every board operation.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt

from workbridge.config import Settings, get_settings
from workbridge.domain import UserRole

BEARER_PREFIX = "bearer "


@dataclass(frozen=True)
class CallerContext:
    user_id: str
    role: UserRole

    @property
    def is_employer(self) -> bool:
        return self.role == UserRole.EMPLOYER


def _role_from_claims(payload: dict) -> UserRole:
    for section in ("user_metadata", "app_metadata"):
        role = (payload.get(section) or {}).get("role")
        if role:
            try:
                return UserRole(str(role).upper())
            except ValueError:
                continue
    return UserRole.WORKER


def resolve_caller(token: str, settings: Settings) -> Optional[CallerContext]:
    """Verify a token and resolve it to a caller, or None if it is invalid."""
    options = {"verify_aud": bool(settings.identity_jwt_audience)}
    try:
        payload = jwt.decode(
            token,
            settings.identity_jwt_secret,
            algorithms=[settings.identity_jwt_algorithm],
            audience=settings.identity_jwt_audience or None,
            options=options,
        )
    except JWTError:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None
    return CallerContext(user_id=str(user_id), role=_role_from_claims(payload))


async def get_current_caller(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> CallerContext:
    header = request.headers.get("Authorization", "")
    token = header[len(BEARER_PREFIX):].strip() if header.lower().startswith(BEARER_PREFIX) else ""

    caller = resolve_caller(token, settings) if token else None
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return caller
