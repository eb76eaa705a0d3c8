"""
schemas/company.py
------------------
Pydantic request/response models for companies and memberships.

Outbound field names are camelCase (userId, companyId, createdBy, ...) to
match what existing clients consume; inbound bodies accept either form.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CompanyCreate(BaseModel):
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        examples=["Acme"],
        description="Company display name",
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class CompanyRef(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class CompanyRead(CompanyRef):
    created_by: str = Field(serialization_alias="createdBy")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class MembershipRead(BaseModel):
    id: str
    user_id: str = Field(serialization_alias="userId")
    company_id: str = Field(serialization_alias="companyId")

    model_config = ConfigDict(from_attributes=True)


class CompanyCreated(BaseModel):
    message: str = "Company created successfully"
    company: CompanyRef
    membership: MembershipRead


class MemberAdd(BaseModel):
    company_id: str = Field(..., min_length=1, alias="companyId")
    user_id: str = Field(..., min_length=1, alias="userId")

    model_config = ConfigDict(populate_by_name=True)


class MemberAdded(BaseModel):
    message: str = "Member added successfully"
    membership: MembershipRead
