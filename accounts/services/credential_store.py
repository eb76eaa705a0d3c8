"""
services/credential_store.py
----------------------------
Persistence for user identities and their password hashes.

Lookups normalise email to lowercase; the store never hashes or checks
passwords itself (that is PasswordHasher's job) and never returns a hash
outside the service layer.
"""

from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

from accounts.core.exceptions import DuplicateUserException
from accounts.core.logging import get_logger
from accounts.db.session import SessionFactory
from accounts.models.user import User

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CredentialStore:

    def __init__(self, sessions: SessionFactory) -> None:
        self._sessions = sessions

    async def get_by_id(self, user_id: str) -> Optional[User]:
        async with self._sessions() as session:
            return await session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        async with self._sessions() as session:
            result = await session.execute(
                select(User).where(User.email == normalize_email(email))
            )
            return result.scalar_one_or_none()

    async def exists(self, *, email: str, username: str) -> bool:
        """True if any user already holds this email OR this username."""
        async with self._sessions() as session:
            result = await session.execute(
                select(User.id)
                .where(
                    or_(
                        User.email == normalize_email(email),
                        User.username == username,
                    )
                )
                .limit(1)
            )
            return result.scalar_one_or_none() is not None

    async def add(self, *, username: str, email: str, hashed_password: str) -> User:
        """
        Persist a new user.
        Raises DuplicateUserException if the unique username/email constraints
        reject the insert (e.g. a concurrent registration won the race).
        """
        user = User(
            username=username,
            email=normalize_email(email),
            hashed_password=hashed_password,
        )
        try:
            async with self._sessions.begin() as session:
                session.add(user)
                await session.flush()  # Trigger DB constraints before commit
                await session.refresh(user)
        except IntegrityError:
            logger.info("User insert rejected by unique constraint", username=username)
            raise DuplicateUserException() from None
        logger.info("User created", user_id=user.id)
        return user

    async def list_users(self) -> list[User]:
        async with self._sessions() as session:
            result = await session.execute(select(User).order_by(User.created_at, User.username))
            return list(result.scalars().all())
