"""
db/base.py
----------
Declarative base and shared mixins.

CreatedAtMixin:  Adds a server-side created_at column.
TimestampMixin:  created_at plus an updated_at column bumped on UPDATE.
generate_uuid:   String UUID primary keys. UUIDs are preferable over integer
                 sequences because they do not let clients enumerate users
                 or companies.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


class CreatedAtMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class TimestampMixin(CreatedAtMixin):
    """Adds server-side created_at and updated_at timestamps."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


def generate_uuid() -> str:
    return str(uuid.uuid4())
