"""API Dependencies"""

from typing import Optional, Callable
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.database import get_db
from app.core.security import decode_token
from app.models.enums import UserRole
from app.services.lookup_service import LookupService

# Security scheme for bearer token
security = HTTPBearer()


class CurrentUser(BaseModel):
    """Identity attached to a request; used for attribution only"""
    user_id: UUID
    role: UserRole
    linked_staff_id: Optional[UUID] = None


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> CurrentUser:
    """
    Resolve the bearer token to the acting system user.

    Args:
        db: Database session
        credentials: HTTP authorization credentials

    Returns:
        Identity of the current user

    Raises:
        HTTPException: If token is invalid or user not found/inactive
    """
    payload = decode_token(credentials.credentials)
    if not payload:
        raise _credentials_exception()

    if payload.get("type") != "access":
        raise _credentials_exception("Invalid token type")

    user_id_str: Optional[str] = payload.get("sub")
    if not user_id_str:
        raise _credentials_exception()

    try:
        user_id = UUID(user_id_str)
    except ValueError:
        raise _credentials_exception("Invalid user ID")

    user = await LookupService.get_system_user(db, user_id)
    if not user:
        raise _credentials_exception("User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )

    return CurrentUser(user_id=user.id, role=user.role, linked_staff_id=user.linked_staff_id)


def require_roles(*roles: UserRole) -> Callable:
    """
    Build a dependency that admits only the given roles.

    Example:
        ```python
        @router.post("/generate")
        async def generate(current_user: CurrentUser = Depends(require_roles(UserRole.ADMIN))):
            ...
        ```
    """
    allowed = set(roles)

    async def dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden: You do not have the necessary permissions to access this resource."
            )
        return current_user

    return dependency
