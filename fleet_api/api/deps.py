from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from fleet_api import crud
from fleet_api.core.errors import AuthError, PermissionDeniedError
from fleet_api.core.permissions import PERMISSIONS, is_allowed
from fleet_api.db.session import get_db  # noqa: F401
from fleet_api.services.clients.auth_provider import AuthProviderClient

bearer_scheme = HTTPBearer(auto_error=False)

_auth_client: Optional[AuthProviderClient] = None


@dataclass
class CurrentUser:
    id: str
    email: Optional[str]
    name: Optional[str]
    role: str


def get_auth_client() -> AuthProviderClient:
    """
    Dependency that provides the shared auth provider client.
    """
    global _auth_client
    if _auth_client is None:
        _auth_client = AuthProviderClient()
    return _auth_client


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    auth_client: AuthProviderClient = Depends(get_auth_client),
) -> CurrentUser:
    """
    Verify the bearer token with the auth provider and attach the caller's role.
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Missing or invalid token")

    user = await auth_client.get_user(credentials.credentials)
    user_id = user.get("id")
    if not user_id:
        raise AuthError("Unauthorized")

    profile = crud.profile.get(db, user_id)
    if not profile:
        raise PermissionDeniedError("Profile not found")

    return CurrentUser(id=user_id, email=user.get("email") or profile.email, name=profile.name, role=profile.role)


def require(operation: str) -> Callable:
    """
    Build the authorization dependency for one operation of the permission table.

    The caller must be authenticated and hold one of the roles listed for
    ``operation``.
    """
    if operation not in PERMISSIONS:
        raise ValueError(f"Operation {operation!r} is not in the permission table")

    async def authorize(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not is_allowed(operation, current_user.role):
            raise PermissionDeniedError("Forbidden: Insufficient permissions")
        return current_user

    return authorize
