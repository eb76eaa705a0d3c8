"""
services/membership_service.py
------------------------------
Sole writer of Company and Membership records.

Invariants:
  - create_company writes the Company and its founding Membership in one
    transaction. If anything fails between the two writes the whole unit is
    rolled back, so no reader ever sees a company without its creator's
    membership.
  - At most one Membership per (user_id, company_id). add_member checks for
    an existing row first; that check is not inside a transaction, and the
    unique constraint on the table rejects the insert that loses a race.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.core.context import Principal
from accounts.core.exceptions import (
    DuplicateMembershipException,
    NotFoundException,
    TransactionFailureException,
    UnauthenticatedException,
    ValidationException,
)
from accounts.core.logging import get_logger
from accounts.db.session import SessionFactory
from accounts.models.company import Company
from accounts.models.membership import Membership
from accounts.models.user import User

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompanyCreation:
    company: Company
    membership: Membership


def _require_principal(principal: Optional[Principal]) -> Principal:
    if principal is None:
        raise UnauthenticatedException(reason="no_principal")
    return principal


class MembershipService:

    def __init__(self, sessions: SessionFactory) -> None:
        self._sessions = sessions

    async def create_company(
        self, principal: Optional[Principal], name: str
    ) -> CompanyCreation:
        """
        Create a company and make the principal its first member.

        Raises:
            UnauthenticatedException: no principal.
            ValidationException: blank name.
            TransactionFailureException: either write failed; nothing was kept.
        """
        principal = _require_principal(principal)
        name = (name or "").strip()
        if not name:
            raise ValidationException("Company name is required", field="name")

        try:
            async with self._sessions.begin() as session:
                company = Company(name=name, created_by=principal.id)
                session.add(company)
                await session.flush()

                membership = self._founding_membership(principal, company)
                session.add(membership)
                await session.flush()

                await session.refresh(company)
                await session.refresh(membership)
        except Exception as exc:
            # session.begin() has already rolled back both writes
            logger.error(
                "Company creation rolled back",
                user_id=principal.id,
                error=str(exc),
                exc_info=True,
            )
            raise TransactionFailureException() from exc

        logger.info(
            "Company created",
            company_id=company.id,
            membership_id=membership.id,
            user_id=principal.id,
        )
        return CompanyCreation(company=company, membership=membership)

    def _founding_membership(self, principal: Principal, company: Company) -> Membership:
        return Membership(
            user_id=principal.id,
            company_id=company.id,
            created_by=principal.id,
        )

    async def _membership_exists(
        self, session: AsyncSession, user_id: str, company_id: str
    ) -> bool:
        existing = await session.execute(
            select(Membership.id).where(
                Membership.user_id == user_id,
                Membership.company_id == company_id,
            )
        )
        return existing.scalar_one_or_none() is not None

    async def add_member(
        self, principal: Optional[Principal], company_id: str, user_id: str
    ) -> Membership:
        """
        Add user_id to company_id on behalf of principal.

        Raises:
            UnauthenticatedException: no principal.
            NotFoundException: unknown company or user.
            DuplicateMembershipException: the pair is already linked.
        """
        principal = _require_principal(principal)

        async with self._sessions() as session:
            if await session.get(Company, company_id) is None:
                raise NotFoundException("Company", company_id)
            if await session.get(User, user_id) is None:
                raise NotFoundException("User", user_id)

            if await self._membership_exists(session, user_id, company_id):
                raise DuplicateMembershipException(user_id, company_id)

            membership = Membership(
                user_id=user_id,
                company_id=company_id,
                created_by=principal.id,
            )
            session.add(membership)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.warning(
                    "Concurrent duplicate membership rejected",
                    user_id=user_id,
                    company_id=company_id,
                )
                raise DuplicateMembershipException(user_id, company_id) from None
            await session.refresh(membership)

        logger.info(
            "Member added",
            membership_id=membership.id,
            company_id=company_id,
            user_id=user_id,
            added_by=principal.id,
        )
        return membership

    async def get_companies_for_user(
        self, principal: Optional[Principal]
    ) -> list[Company]:
        """Companies the principal belongs to, in the order they joined."""
        principal = _require_principal(principal)

        async with self._sessions() as session:
            result = await session.execute(
                select(Company)
                .join(Membership, Membership.company_id == Company.id)
                .where(Membership.user_id == principal.id)
                .order_by(Membership.created_at, Company.name)
            )
            return list(result.scalars().all())
