"""Session authentication and role authorization."""

import hashlib
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from staff_api.config import get_settings
from staff_api.database import get_db
from staff_api.models.domain.user import User, UserRole
from staff_api.repositories.user_repository import SessionRepository

logger = logging.getLogger(__name__)


def hash_session_token(token: str) -> str:
    """Hash an opaque session id for storage and lookup.

    Args:
        token: Raw session id from the cookie

    Returns:
        SHA-256 hex digest
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


async def get_current_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Resolve the authenticated user from the session cookie.

    Args:
        request: Incoming request
        db: Database session

    Returns:
        User domain model

    Raises:
        HTTPException: If there is no valid session or the user is inactive
    """
    token = request.cookies.get(get_settings().session_cookie_name)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    user_orm = await SessionRepository(db).get_active_user(hash_session_token(token), datetime.now(UTC))
    if user_orm is None or not user_orm.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    user = User.model_validate(user_orm)
    # Rate limiting keys on the actor once known
    request.state.actor_id = str(user.id)
    return user


def require_role(*roles: UserRole) -> Callable[..., Awaitable[User]]:
    """Build a dependency that admits only users holding one of ``roles``.

    Args:
        *roles: Accepted roles

    Returns:
        FastAPI dependency returning the current user
    """

    async def dependency(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        if current_user.role not in roles:
            logger.warning("Role check failed for user %s on %s", current_user.id, roles)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Admin access required" if roles == (UserRole.ADMIN,) else "Insufficient permissions",
            )
        return current_user

    return dependency


require_admin = require_role(UserRole.ADMIN)
