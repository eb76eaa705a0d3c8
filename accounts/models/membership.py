"""
models/membership.py
--------------------
Join record between one User and one Company.

At most one row per (user_id, company_id). MembershipService checks for an
existing row before inserting; the unique constraint below is what makes
two concurrent add_member calls for the same pair fail instead of both
succeeding.
"""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from accounts.db.base import Base, CreatedAtMixin, generate_uuid


class Membership(Base, CreatedAtMixin):
    __tablename__ = "memberships"
    __table_args__ = (
        UniqueConstraint("user_id", "company_id", name="uq_membership_user_company"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_by: Mapped[str] = mapped_column(String(36), nullable=False)

    def __repr__(self) -> str:
        return f"<Membership id={self.id} user_id={self.user_id} company_id={self.company_id}>"
