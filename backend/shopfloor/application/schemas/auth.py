"""Pydantic DTOs for personnel registration, login and updates."""

from pydantic import Field

from shopfloor.application.schemas.common import CamelModel, MessageResponse, StatusResponse


class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    setup_key: str | None = None


class LoginRequest(CamelModel):
    username: str
    password: str


class UpdatePersonnelRequest(CamelModel):
    current_username: str = Field(..., min_length=1)
    new_username: str | None = Field(None, max_length=100)
    new_password: str | None = None
    key: str | None = None


class UsernameSchema(CamelModel):
    username: str


class UserSummarySchema(UsernameSchema):
    role: str


class RegisterResponse(StatusResponse):
    data: UsernameSchema


class LoginResponse(StatusResponse):
    user: UserSummarySchema


class UpdatePersonnelResponse(MessageResponse):
    data: UsernameSchema
