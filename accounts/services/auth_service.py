"""
services/auth_service.py
------------------------
Registration and login: CredentialStore + PasswordHasher + TokenService.

bcrypt is CPU-bound, so hashing and verification run in the threadpool and
the event loop keeps serving other requests meanwhile.
"""

from dataclasses import dataclass

from fastapi.concurrency import run_in_threadpool

from accounts.core.exceptions import (
    DuplicateUserException,
    InvalidCredentialsException,
    ValidationException,
)
from accounts.core.logging import get_logger
from accounts.core.security import PasswordHasher, TokenService, password_problem
from accounts.models.user import User
from accounts.services.credential_store import CredentialStore

logger = get_logger(__name__)

USERNAME_MIN_LENGTH = 3


@dataclass(frozen=True)
class AuthResult:
    user: User
    token: str


class AuthService:

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self._store = store
        self._hasher = hasher
        self._tokens = tokens
        # Verified against when the email is unknown, so both login failure
        # paths spend the same bcrypt time.
        self._dummy_hash = hasher.hash("dummy-password-for-timing")

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        """
        Create an account and return it with a fresh token.

        Raises:
            ValidationException: a field is missing or the username is too short,
                or the password cannot be hashed without loss.
            DuplicateUserException: the email or username is already taken.
        """
        username = (username or "").strip()
        email = (email or "").strip().lower()
        if not username or not email or not password:
            raise ValidationException("Please provide all required fields")
        if len(username) < USERNAME_MIN_LENGTH:
            raise ValidationException(
                f"Username must be at least {USERNAME_MIN_LENGTH} characters",
                field="username",
            )
        problem = password_problem(password)
        if problem:
            raise ValidationException(problem, field="password")

        if await self._store.exists(email=email, username=username):
            logger.info("Registration rejected: duplicate user", username=username)
            raise DuplicateUserException()

        hashed = await run_in_threadpool(self._hasher.hash, password)
        user = await self._store.add(username=username, email=email, hashed_password=hashed)
        logger.info("User registered", user_id=user.id)
        return AuthResult(user=user, token=self._tokens.issue(user.id))

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Exchange email + password for a token.

        Raises InvalidCredentialsException for an unknown email and for a
        wrong password alike.
        """
        if not email or not password:
            raise ValidationException("Please provide email and password")

        user = await self._store.get_by_email(email)
        if user is None:
            await run_in_threadpool(self._hasher.verify, password, self._dummy_hash)
            logger.info("Login failed", reason="unknown_email")
            raise InvalidCredentialsException()

        if not await run_in_threadpool(self._hasher.verify, password, user.hashed_password):
            logger.info("Login failed", reason="wrong_password", user_id=user.id)
            raise InvalidCredentialsException()

        logger.info("User logged in", user_id=user.id)
        return AuthResult(user=user, token=self._tokens.issue(user.id))
