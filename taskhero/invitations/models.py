"""
TaskHero invitation models.

Pydantic models for invitations and for the outcomes of token verification.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from ..auth.models import UserRole
from ..utils.dates import utcnow

# Fixed lifetime of an invitation, counted from its creation
INVITATION_TTL = timedelta(days=7)


class InvitationStatus(str, Enum):
    """Status of an invitation as shown in listings."""

    ACTIVE = "active"
    USED = "used"
    EXPIRED = "expired"


class Invitation(BaseModel):
    """
    Invitation model - a one-time offer to register under a given role.

    Invitations are stored in the invitations table. used flips from
    false to true exactly once; expires_at never changes after insert.
    """

    id: UUID
    email: str
    role: UserRole = UserRole.USER

    # Bearer credential embedded in the registration link
    token: str

    # Who sent the invite
    created_by: Optional[UUID] = None

    # Timestamps
    created_at: datetime
    expires_at: datetime

    used: bool = False

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "newuser@example.com",
                "role": "user",
                "token": "Jx3kYq0v0m5yq4sQb9k1m3m1u0m0k9p2g2d8Vw4S9Zc",
                "created_by": "012e3456-e89b-12d3-a456-426614174000",
                "created_at": "2024-01-01T00:00:00Z",
                "expires_at": "2024-01-08T00:00:00Z",
                "used": False,
            }
        },
    }

    @field_validator("created_at", "expires_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Rows written without an offset are UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """An invitation is expired once now reaches expires_at."""
        return self.expires_at <= (now or utcnow())

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return not self.used and not self.is_expired(now)

    def status(self, now: Optional[datetime] = None) -> InvitationStatus:
        if self.used:
            return InvitationStatus.USED
        if self.is_expired(now):
            return InvitationStatus.EXPIRED
        return InvitationStatus.ACTIVE


class CreateInvitationRequest(BaseModel):
    """Request model for creating a new invitation."""

    email: EmailStr = Field(..., description="Email address to invite")
    role: UserRole = Field(UserRole.USER, description="Role granted on registration")


class CreatedInvitation(BaseModel):
    """
    A freshly persisted invitation together with its shareable link.

    email_sent is None when no delivery was attempted, False when the
    email function failed (the invitation still stands).
    """

    invitation: Invitation
    link: str
    email_sent: Optional[bool] = None


class EmailDelivery(BaseModel):
    """Result returned by the invitation email function."""

    recipient: str
    message_id: Optional[str] = None
    response: Dict[str, Any] = Field(default_factory=dict)


class VerificationFailureReason(str, Enum):
    """Why a token does not grant registration."""

    NOT_FOUND = "not_found"
    ALREADY_USED = "already_used"
    EXPIRED = "expired"
    DATABASE_ERROR = "database_error"


VERIFICATION_MESSAGES: Dict[str, str] = {
    "valid": "Invitation verified. Choose a password to finish creating your account.",
    VerificationFailureReason.NOT_FOUND.value: (
        "This invitation link is not valid. Check that you copied the whole link."
    ),
    VerificationFailureReason.ALREADY_USED.value: (
        "This invitation has already been used. Sign in with your account instead."
    ),
    VerificationFailureReason.EXPIRED.value: (
        "This invitation has expired. Ask an administrator to send a new one."
    ),
    VerificationFailureReason.DATABASE_ERROR.value: (
        "We could not check this invitation right now. Please try again in a moment."
    ),
}


class ValidInvitation(BaseModel):
    """Successful verification: the token grants registration."""

    ok: Literal[True] = True
    invitation: Invitation

    @property
    def email(self) -> str:
        return self.invitation.email

    @property
    def role(self) -> UserRole:
        return self.invitation.role

    @property
    def message(self) -> str:
        return VERIFICATION_MESSAGES["valid"]


class VerificationFailure(BaseModel):
    """
    Failed verification.

    cause holds the original exception for DATABASE_ERROR so it can be
    logged or re-raised; it is excluded from serialization.
    """

    ok: Literal[False] = False
    reason: VerificationFailureReason
    cause: Optional[Exception] = Field(default=None, exclude=True, repr=False)

    model_config = {"arbitrary_types_allowed": True}

    @property
    def message(self) -> str:
        return VERIFICATION_MESSAGES[self.reason.value]


TokenVerification = Union[ValidInvitation, VerificationFailure]
