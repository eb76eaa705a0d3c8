"""
core/security.py
----------------
Password hashing and bearer token utilities.

Design decisions:
  - bcrypt via passlib, work factor configurable (BCRYPT_ROUNDS, default 10).
    Each hash carries its own algorithm id, cost and salt, so verification
    never needs the current configuration.
  - Tokens are HS256 JWTs carrying only `sub` (user id), `iat` and `exp`.
    They are never persisted; validity is recomputed on every request.
  - Verification returns a TokenVerification instead of raising, so callers
    branch on TokenError.INVALID / TokenError.EXPIRED explicitly.
  - Expiry is checked against an injectable clock rather than the library's
    wall clock, which keeps the 7-day window testable.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode
from passlib.context import CryptContext

from accounts.core.config import Settings

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Password Utilities ────────────────────────────────────────────────────────

# bcrypt only reads the first 72 bytes of the secret and cannot take NUL bytes
MAX_PASSWORD_BYTES = 72


def password_problem(plain: str) -> Optional[str]:
    """Return why bcrypt cannot hash `plain` faithfully, or None if it can."""
    if "\x00" in plain:
        return "Password must not contain NUL characters"
    if len(plain.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
    return None


class PasswordHasher:
    """Salted, adaptive one-way hashing backed by bcrypt."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        return cls(rounds=settings.BCRYPT_ROUNDS)

    def hash(self, plain: str) -> str:
        """
        Return a self-describing bcrypt record ($2b$<cost>$<salt+digest>).

        Raises ValueError for a password bcrypt would truncate or reject
        (see password_problem); callers validate before hashing.
        """
        problem = password_problem(plain)
        if problem:
            raise ValueError(problem)
        return self._context.hash(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        """
        Constant-time comparison of plain password against stored hash.

        Returns False on a wrong password, including passwords hash() would
        never accept: a stored record always comes from a password of at
        most 72 bytes, so a longer candidate cannot be the same password.
        A stored record that cannot be identified as bcrypt raises
        ValueError: that is data corruption, not a failed login.
        """
        if password_problem(plain):
            # still pay for one bcrypt round trip so timing does not differ
            self._context.dummy_verify()
            return False
        return self._context.verify(plain, hashed)


# ── Token Utilities ───────────────────────────────────────────────────────────

def _is_canonical_segment(segment: str) -> bool:
    """True if `segment` is the one unpadded base64url spelling of its bytes."""
    try:
        raw = base64url_decode(segment.encode("ascii"))
    except ValueError:
        return False
    return base64url_encode(raw).decode("ascii") == segment


class TokenError(str, Enum):
    INVALID = "invalid_token"
    EXPIRED = "token_expired"


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of TokenService.verify: either a subject id or an error kind."""

    subject_id: Optional[str] = None
    error: Optional[TokenError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.subject_id is not None

    @classmethod
    def success(cls, subject_id: str) -> "TokenVerification":
        return cls(subject_id=subject_id)

    @classmethod
    def failure(cls, error: TokenError) -> "TokenVerification":
        return cls(error=error)


class TokenService:
    """Issues and verifies symmetric-key signed, time-bounded bearer tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(days=7),
        clock: Clock = utcnow,
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, clock: Clock = utcnow) -> "TokenService":
        return cls(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            clock=clock,
        )

    def issue(self, subject_id: str) -> str:
        """
        Mint a token for the given user id.

        Args:
            subject_id: User UUID (stored in 'sub' claim).

        Returns:
            Signed JWT string, valid for expires_delta from now.
        """
        now = self._clock()
        payload: Dict[str, Any] = {
            "sub": subject_id,
            "iat": now,
            "exp": now + self.expires_delta,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenVerification:
        """
        Check signature first, then expiry.

        A token whose signature matches but whose `exp` has passed yields
        TokenError.EXPIRED; anything structurally wrong or signed with a
        different key yields TokenError.INVALID. So does any segment that
        is not in canonical base64url form: the decoder ignores the unused
        low bits of a final character, and without this check several
        spellings of one signature would all be accepted.
        """
        segments = token.split(".")
        if len(segments) != 3 or not all(_is_canonical_segment(s) for s in segments):
            return TokenVerification.failure(TokenError.INVALID)

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            return TokenVerification.failure(TokenError.INVALID)

        subject_id = payload.get("sub")
        expires_at = payload.get("exp")
        if not isinstance(subject_id, str) or not subject_id:
            return TokenVerification.failure(TokenError.INVALID)
        if not isinstance(expires_at, (int, float)):
            return TokenVerification.failure(TokenError.INVALID)

        if self._clock().timestamp() >= expires_at:
            return TokenVerification.failure(TokenError.EXPIRED)
        return TokenVerification.success(subject_id)
