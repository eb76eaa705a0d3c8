"""
api/routes/users.py
-------------------
GET /api/users - list every user's public fields (authenticated).
Used by clients to look up the userId to pass to POST /api/companies/members.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from accounts.dependencies import CurrentPrincipal, get_credential_store
from accounts.schemas.user import UserListItem
from accounts.services.credential_store import CredentialStore

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=list[UserListItem], summary="List users")
async def list_users(
    principal: CurrentPrincipal,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> list[UserListItem]:
    users = await store.list_users()
    return [UserListItem.model_validate(u) for u in users]
