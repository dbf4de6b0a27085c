#!/usr/bin/env python
"""Create (or reuse) a user and issue a session id for it."""

import asyncio
import secrets
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from staff_api.config import get_settings
from staff_api.database import async_session_maker
from staff_api.models.domain.user import UserRole
from staff_api.repositories.user_repository import SessionRepository, UserRepository
from staff_api.security.auth import hash_session_token


async def issue_session(username: str, email: str, role: UserRole, session_days: int) -> bool:
    """Ensure the user exists and print a session cookie for it."""
    settings = get_settings()

    async with async_session_maker() as session:
        user_repo = UserRepository(session)
        user = await user_repo.get_by_username(username)
        if user is None:
            user = await user_repo.create(
                username=username,
                email=email.lower(),
                role=role.value,
                is_active=True,
            )
            print(f"{role.value.capitalize()} user created: {username}")
        elif not user.is_active:
            print(f"User {username} is deactivated")
            return False
        else:
            print(f"Reusing existing user {username} (role={user.role})")

        # Only the hash is stored; the raw id is shown once
        token = secrets.token_urlsafe(32)
        await SessionRepository(session).create_session(
            user_id=user.id,
            token_hash=hash_session_token(token),
            expires_at=datetime.now(UTC) + timedelta(days=session_days),
        )

        await session.commit()
        print(f"Cookie: {settings.session_cookie_name}={token}")
        return True


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Create a user and issue a session")
    parser.add_argument("--username", required=True, help="Username")
    parser.add_argument("--email", required=True, help="Email address")
    parser.add_argument("--role", choices=[r.value for r in UserRole], default=UserRole.ADMIN.value)
    parser.add_argument("--days", type=int, default=7, help="Session lifetime in days")
    args = parser.parse_args()

    ok = asyncio.run(issue_session(args.username, args.email, UserRole(args.role), args.days))
    sys.exit(0 if ok else 1)
