"""
api/routes/companies.py
-----------------------
Company and membership endpoints. All require authentication.

POST /api/companies          - Create a company; the caller becomes its first member.
GET  /api/companies          - Companies the caller is a member of.
POST /api/companies/members  - Add a user to a company.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from accounts.dependencies import CurrentPrincipal, get_membership_service
from accounts.schemas.company import (
    CompanyCreate,
    CompanyCreated,
    CompanyRead,
    CompanyRef,
    MemberAdd,
    MemberAdded,
    MembershipRead,
)
from accounts.services.membership_service import MembershipService

router = APIRouter(prefix="/api/companies", tags=["Companies"])

Memberships = Annotated[MembershipService, Depends(get_membership_service)]


@router.post(
    "",
    response_model=CompanyCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create a company",
)
async def create_company(
    body: CompanyCreate,
    principal: CurrentPrincipal,
    memberships: Memberships,
) -> CompanyCreated:
    created = await memberships.create_company(principal, body.name)
    return CompanyCreated(
        company=CompanyRef.model_validate(created.company),
        membership=MembershipRead.model_validate(created.membership),
    )


@router.get(
    "",
    response_model=list[CompanyRead],
    summary="List the caller's companies",
)
async def list_companies(
    principal: CurrentPrincipal,
    memberships: Memberships,
) -> list[CompanyRead]:
    companies = await memberships.get_companies_for_user(principal)
    return [CompanyRead.model_validate(c) for c in companies]


@router.post(
    "/members",
    response_model=MemberAdded,
    status_code=status.HTTP_201_CREATED,
    summary="Add a member to a company",
)
async def add_member(
    body: MemberAdd,
    principal: CurrentPrincipal,
    memberships: Memberships,
) -> MemberAdded:
    membership = await memberships.add_member(principal, body.company_id, body.user_id)
    return MemberAdded(membership=MembershipRead.model_validate(membership))
