"""User and session repositories."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select

from staff_api.models.orm.user import UserORM, UserSessionORM
from staff_api.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserORM]):
    """Repository for user identities."""

    model = UserORM

    async def get_by_username(self, username: str) -> UserORM | None:
        """Get user by username.

        Args:
            username: Unique username

        Returns:
            UserORM or None if not found
        """
        result = await self.session.execute(select(UserORM).where(UserORM.username == username))
        return result.scalar_one_or_none()


class SessionRepository(BaseRepository[UserSessionORM]):
    """Repository for server-side sessions."""

    model = UserSessionORM

    async def get_active_user(self, token_hash: str, now: datetime) -> UserORM | None:
        """Resolve the user owning an unexpired session.

        Args:
            token_hash: SHA-256 hex digest of the session id
            now: Current time

        Returns:
            UserORM or None if the session is unknown or expired
        """
        result = await self.session.execute(
            select(UserORM)
            .join(UserSessionORM, UserSessionORM.user_id == UserORM.id)
            .where(UserSessionORM.token_hash == token_hash)
            .where(UserSessionORM.expires_at > now)
        )
        return result.scalar_one_or_none()

    async def create_session(self, user_id: UUID, token_hash: str, expires_at: datetime) -> UserSessionORM:
        """Store a new session.

        Args:
            user_id: Owning user
            token_hash: SHA-256 hex digest of the session id
            expires_at: Expiry time

        Returns:
            Created UserSessionORM
        """
        return await self.create(user_id=user_id, token_hash=token_hash, expires_at=expires_at)
