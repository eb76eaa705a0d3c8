"""
core/context.py
---------------
The authenticated principal for one request.

The Auth Gate returns a Principal and route handlers pass it explicitly to
the services, instead of hanging the user off a shared request object.
"""

from dataclasses import dataclass

from accounts.models.user import User


@dataclass(frozen=True)
class Principal:
    """Immutable snapshot of the user resolved from a verified token."""

    id: str
    username: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(id=user.id, username=user.username, email=user.email)
