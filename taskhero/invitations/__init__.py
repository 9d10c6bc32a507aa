"""
TaskHero invitations module.

Handles the invitation lifecycle: issuance, verification, consumption.
"""

from .email import InvitationMailer
from .invites import InvitationManager, resolve_verification
from .models import (
    INVITATION_TTL,
    VERIFICATION_MESSAGES,
    CreatedInvitation,
    EmailDelivery,
    Invitation,
    InvitationStatus,
    TokenVerification,
    ValidInvitation,
    VerificationFailure,
    VerificationFailureReason,
)

__all__ = [
    "InvitationManager",
    "InvitationMailer",
    "resolve_verification",
    "INVITATION_TTL",
    "VERIFICATION_MESSAGES",
    "CreatedInvitation",
    "EmailDelivery",
    "Invitation",
    "InvitationStatus",
    "TokenVerification",
    "ValidInvitation",
    "VerificationFailure",
    "VerificationFailureReason",
]
