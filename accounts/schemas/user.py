"""
schemas/user.py
---------------
Pydantic models for registration, login, and user responses.

Security note:
  - hashed_password is NEVER included in any response schema.
  - Presence and shape are checked here; the username length rule and email
    normalisation are enforced again in AuthService so they hold for callers
    that bypass HTTP.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from accounts.core.security import password_problem


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=150, examples=["alice"])
    email: EmailStr = Field(..., examples=["alice@x.com"])
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        problem = password_problem(v)
        if problem:
            raise ValueError(problem)
        return v


# Login passwords are not checked against the bcrypt limits: an unusable
# password simply fails verification, so the response stays INVALID_CREDENTIALS.
class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class UserPublic(BaseModel):
    """The only user fields ever returned to a client."""

    id: str
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserListItem(UserPublic):
    created_at: datetime = Field(serialization_alias="createdAt")


class AuthResponse(BaseModel):
    user: UserPublic
    token: str
