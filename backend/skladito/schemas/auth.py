from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    code: str = Field(max_length=16)


class ActivateRequest(BaseModel):
    invite_token: str = Field(min_length=1, max_length=64)
    code: str = Field(max_length=16)


class InviteCreate(BaseModel):
    name: str = Field(min_length=1, max_length=80)
    is_admin: bool = False


class UserPatch(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=80)
    is_admin: bool | None = None


class UserRead(BaseModel):
    """Public view of a user. Never carries the login code."""

    id: str
    name: str
    is_admin: bool
    is_active: bool
    invite_expires: datetime | None
    created: datetime


class UserInviteRead(UserRead):
    invite_token: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
