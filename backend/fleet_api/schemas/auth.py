"""
Fleet Management API — Authentication Schemas
=============================================

What:  Login / sign-up request bodies and the token response.
How:   The response serializes `access_token` as `accessToken`, matching the
       contract `{accessToken, user: {id, email}}`.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class CreateUserRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=1)
    role: str = Field(description="Role name, e.g. ADMIN or USER")


class UserSummary(BaseModel):
    id: int
    email: str

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    access_token: str = Field(alias="accessToken")
    user: UserSummary

    model_config = ConfigDict(populate_by_name=True)


class PrincipalResponse(BaseModel):
    """Claims of the principal attached to the current request."""
    user_id: int
    email: str
    authorities: List[str]
