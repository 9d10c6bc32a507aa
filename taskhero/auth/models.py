"""
TaskHero auth models.

Pydantic models for roles, profiles and sessions in TaskHero.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """Roles a profile (and an invitation) can carry."""

    ADMIN = "admin"
    USER = "user"


class UserProfile(BaseModel):
    """
    User profile model - represents a row in the user_profiles table.

    Keyed 1:1 to the Supabase auth account id. Rows are created by the
    handle_new_user trigger when an account is created.
    """

    id: UUID
    email: str
    role: UserRole = UserRole.USER

    # Timestamps
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "user@example.com",
                "role": "user",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z",
            }
        },
    }

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserSession(BaseModel):
    """
    User session model - the authenticated principal behind an operation.

    Every manager method that acts on behalf of a user takes one of these
    explicitly instead of reading a global "current user".
    """

    user_id: UUID
    email: str
    role: UserRole = UserRole.USER

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    token_type: str = "bearer"

    model_config = {
        "json_schema_extra": {
            "example": {
                "user_id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "user@example.com",
                "role": "admin",
                "access_token": "eyJhbGc...",
                "refresh_token": "xyz123...",
                "expires_at": 1704067200,
                "token_type": "bearer",
            }
        }
    }

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class PasswordChange(BaseModel):
    """Request model for changing a password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class RegistrationRequest(BaseModel):
    """Request model for completing an invitation-based registration."""

    token: str
    password: str = Field(
        ...,
        min_length=6,
        description="Password the invitee sets for the new account",
    )


class RegistrationResult(BaseModel):
    """
    Outcome of a registration.

    invitation_consumed is False when the account was created but the
    invitation row could not be marked used; that case is logged for
    reconciliation and is not a registration failure.
    """

    user_id: UUID
    email: EmailStr
    role: UserRole
    invitation_id: UUID
    invitation_consumed: bool = True
    session: Optional[UserSession] = None
