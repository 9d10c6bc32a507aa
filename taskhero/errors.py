"""
TaskHero error taxonomy.

Collaborator failures (PostgREST, GoTrue, transport) are not wrapped here;
they propagate as the collaborator's own exception types unless a caller
needs to tell them apart from an expected outcome.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .invitations.models import VerificationFailure


class TaskHeroError(Exception):
    """Base class for all TaskHero errors."""


class AuthorizationError(TaskHeroError):
    """The caller lacks the capability required for the operation."""


class AuthenticationRequiredError(AuthorizationError):
    """No authenticated session was supplied."""


class InvalidInputError(TaskHeroError, ValueError):
    """Input was rejected before any storage call."""


class ConflictError(TaskHeroError):
    """A uniqueness constraint was violated."""


class NotFoundError(TaskHeroError, LookupError):
    """An identifier did not resolve to a row."""


class InvitationStateError(TaskHeroError):
    """The invitation exists but is not in a state that allows the operation."""


class InvitationUnavailableError(InvitationStateError):
    """Token verification failed at the point of registration."""

    def __init__(self, verification: "VerificationFailure") -> None:
        super().__init__(verification.message)
        self.verification = verification

    @property
    def reason(self):
        return self.verification.reason


class RegistrationError(TaskHeroError):
    """The auth provider did not produce an account."""


class EmailDeliveryError(TaskHeroError):
    """The invitation email function failed."""
