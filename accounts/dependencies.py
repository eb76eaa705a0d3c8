"""
dependencies.py
---------------
Auth Gate and FastAPI dependency functions.

Flow:
  1. APIKeyHeader reads the raw Authorization header (absent → None).
     OAuth2PasswordBearer is not used because clients may send the bare
     token without the "Bearer " scheme.
  2. AuthGate strips an optional "Bearer " prefix and verifies the token.
  3. The token's subject is re-loaded from the CredentialStore so tokens of
     users that no longer exist are rejected.
  4. The resolved Principal is returned to the route, which passes it to the
     services explicitly.

Every failure produces the same 401 body. The specific reason is logged
server-side only.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from accounts.core.context import Principal
from accounts.core.exceptions import MissingTokenException, UnauthenticatedException
from accounts.core.logging import get_logger
from accounts.core.security import TokenService
from accounts.services.auth_service import AuthService
from accounts.services.credential_store import CredentialStore
from accounts.services.membership_service import MembershipService

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "

authorization_header = APIKeyHeader(
    name="Authorization",
    scheme_name="BearerToken",
    description="`Bearer <token>` or the bare token",
    auto_error=False,
)


class AuthGate:
    """Resolves an Authorization header value into a Principal, or rejects."""

    def __init__(self, tokens: TokenService, store: CredentialStore) -> None:
        self._tokens = tokens
        self._store = store

    async def authenticate(self, authorization: Optional[str]) -> Principal:
        token = (authorization or "").lstrip()
        if token.startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX):]
        token = token.strip()
        if not token:
            logger.warning("Authentication failed", reason="missing_token")
            raise MissingTokenException()

        verification = self._tokens.verify(token)
        if not verification.ok:
            logger.warning("Authentication failed", reason=verification.error.value)
            raise UnauthenticatedException(reason=verification.error.value)

        user = await self._store.get_by_id(verification.subject_id)
        if user is None:
            logger.warning(
                "Authentication failed",
                reason="unknown_subject",
                user_id=verification.subject_id,
            )
            raise UnauthenticatedException(reason="unknown_subject")

        return Principal.from_user(user)


# ── Service accessors (instances live on app.state, built by create_application) ──

def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_membership_service(request: Request) -> MembershipService:
    return request.app.state.membership_service


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credential_store


def get_auth_gate(request: Request) -> AuthGate:
    return request.app.state.auth_gate


async def get_current_principal(
    authorization: Annotated[Optional[str], Depends(authorization_header)],
    gate: Annotated[AuthGate, Depends(get_auth_gate)],
) -> Principal:
    """Raises 401 unless the request carries a valid token for an existing user."""
    return await gate.authenticate(authorization)


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
