"""User schema definitions.

This module defines the User and Principal data models plus the request and
response bodies of the authentication endpoints.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import ROLE_STUDENT, ROLE_TEACHER, ROLES, UNASSIGNED_GUARDIAN_ID


class User(BaseModel):
    """structure of a stored user"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    password_hash: str
    role: str = ROLE_STUDENT
    institution: str = ""
    guardian_id: int = UNASSIGNED_GUARDIAN_ID
    class_name: str = ""


class Principal(BaseModel):
    """Verified identity attached to an authenticated request."""

    id: int
    email: str
    role: str = ROLE_STUDENT
    guardian_id: int = UNASSIGNED_GUARDIAN_ID
    class_name: str = ""
    institution: str = ""

    @property
    def is_teacher(self) -> bool:
        return self.role == ROLE_TEACHER


class UserPublic(BaseModel):
    """User fields that are safe to return to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: str
    institution: str = ""
    guardian_id: int = UNASSIGNED_GUARDIAN_ID
    class_name: str = ""


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)
    role: str = ROLE_STUDENT
    institution: str = Field(default="", max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value

    @field_validator("name", "institution")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("role")
    @classmethod
    def check_role(cls, value: str) -> str:
        if value not in ROLES:
            raise ValueError(f"Invalid role: {value}. Must be one of {', '.join(ROLES)}.")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class AuthResponse(BaseModel):
    """Token plus the user it was issued for."""

    token: str
    user: UserPublic
    message: Optional[str] = None


class CurrentUserResponse(BaseModel):
    user: Principal
