"""
models/user.py
--------------
User ORM model.

username and email are each globally unique; email is stored lowercased.
The hashed_password column stores bcrypt hashes only - plain text is
never stored and never logged.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from accounts.db.base import Base, CreatedAtMixin, generate_uuid


class User(Base, CreatedAtMixin):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    username: Mapped[str] = mapped_column(
        String(150), unique=True, nullable=False, index=True
    )
    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False, index=True
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username}>"
