"""
models/company.py
-----------------
Company (tenant) ORM model.

created_by is fixed at creation. It references users.id by value only: a
company does not own its creator and is not deleted with it.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from accounts.db.base import Base, TimestampMixin, generate_uuid


class Company(Base, TimestampMixin):
    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_by: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Company id={self.id} name={self.name}>"
