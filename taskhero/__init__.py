"""
TaskHero - invitation-only task management on Supabase.

Administrators invite people by email; an invitation carries the role the
new account receives and a single-use, expiring registration token.

Example:
    ```python
    from taskhero import TaskHero, UserRole

    async with await TaskHero.create() as app:
        admin = await app.sessions.sign_in_with_password(
            email="admin@example.com", password="secure123"
        )

        # Invite someone
        created = await app.invites.invite(admin, "new@example.com", UserRole.USER)

        # On the registration page
        verification = await app.invites.verify_token(token)
        if verification.ok:
            result = await app.registration.register(token, "new-password")

        # Tasks
        task = await app.tasks.create(admin, title="Plan sprint")
    ```
"""

from .auth import RegistrationResult, UserProfile, UserRole, UserSession
from .client import TaskHero
from .config import TaskHeroConfig, load_config
from .errors import (
    AuthenticationRequiredError,
    AuthorizationError,
    ConflictError,
    EmailDeliveryError,
    InvalidInputError,
    InvitationStateError,
    InvitationUnavailableError,
    NotFoundError,
    RegistrationError,
    TaskHeroError,
)
from .invitations import (
    CreatedInvitation,
    Invitation,
    InvitationStatus,
    ValidInvitation,
    VerificationFailure,
    VerificationFailureReason,
)
from .tasks import Task, TaskPriority, TaskStatus

__version__ = "0.1.0"

__all__ = [
    # Main client
    "TaskHero",
    "TaskHeroConfig",
    "load_config",
    # Auth
    "RegistrationResult",
    "UserProfile",
    "UserRole",
    "UserSession",
    # Invitations
    "CreatedInvitation",
    "Invitation",
    "InvitationStatus",
    "ValidInvitation",
    "VerificationFailure",
    "VerificationFailureReason",
    # Tasks
    "Task",
    "TaskPriority",
    "TaskStatus",
    # Errors
    "TaskHeroError",
    "AuthorizationError",
    "AuthenticationRequiredError",
    "InvalidInputError",
    "ConflictError",
    "NotFoundError",
    "InvitationStateError",
    "InvitationUnavailableError",
    "RegistrationError",
    "EmailDeliveryError",
]
