"""
Invitation-based registration for TaskHero.

Registration spans two collaborators with no shared transaction:

1. the auth provider creates the account (carrying the invitation's role
   in user metadata, where the profile trigger picks it up)
2. the invitations table marks the invitation used

Step 1 always runs first, so a failed sign-up leaves the invitation
usable. A failure in step 2 does not fail the registration; it is logged
for reconciliation and reported on the result.

Sign-up runs on a spawned client: a successful sign-up signs the new user
in, and the client shared by the rest of the app must keep acting as its
own principal.

Wraps: supabase_auth._async.gotrue_client.AsyncGoTrueClient.sign_up
Source: venv/lib/python3.14/site-packages/supabase_auth/_async/gotrue_client.py
"""

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import ValidationError

from ..errors import InvalidInputError, InvitationUnavailableError, RegistrationError
from ..invitations.models import Invitation, VerificationFailure, VerificationFailureReason
from .models import RegistrationRequest, RegistrationResult, UserSession

if TYPE_CHECKING:
    from ..client import TaskHero

logger = logging.getLogger(__name__)


class RegistrationManager:
    """
    Completes registrations started from an invitation link.

    Example:
        ```python
        verification = await app.invites.verify_token(token)
        if not verification.ok:
            print(verification.message)
        else:
            result = await app.registration.register(token, password)
        ```
    """

    def __init__(self, app: "TaskHero") -> None:
        """
        Initialize RegistrationManager.

        Args:
            app: Main TaskHero client instance
        """
        self.app = app
        self.client = app.client
        self.config = app.config

    async def register(self, token: str, password: str) -> RegistrationResult:
        """
        Create the invitee's account and consume the invitation.

        The token is verified again here, at the point of write, even if
        the caller verified it when the registration page loaded.

        Args:
            token: Invitation token from the registration link
            password: Password for the new account

        Returns:
            RegistrationResult for the new account

        Raises:
            InvalidInputError: If the password is shorter than 6 characters
            InvitationUnavailableError: If the token is not currently valid
            APIError, httpx.HTTPError: If the token could not be looked up
            AuthApiError: If the auth provider rejected the sign-up
            RegistrationError: If the auth provider returned no account
        """
        try:
            RegistrationRequest(token=token, password=password)
        except ValidationError as exc:
            failed = {error["loc"][0] for error in exc.errors() if error["loc"]}
            if "password" in failed:
                raise InvalidInputError("Password must be at least 6 characters") from exc
            raise InvitationUnavailableError(
                VerificationFailure(reason=VerificationFailureReason.NOT_FOUND)
            ) from exc

        verification = await self.app.invites.verify_token(token)
        if not verification.ok:
            if verification.cause is not None:
                raise verification.cause
            raise InvitationUnavailableError(verification)

        invitation = verification.invitation

        # Left open: signing it out would revoke the session returned below.
        signup_client = await self.client.spawn()
        auth_response = await signup_client.auth.sign_up({
            "email": invitation.email,
            "password": password,
            "options": {
                "email_redirect_to": self.config.login_url,
                "data": {
                    "invitation_token": token,
                    "role": invitation.role.value,
                    "requires_password_setup": True,
                },
            },
        })

        auth_user = auth_response.user if auth_response else None
        if auth_user is None:
            raise RegistrationError(f"No account was created for {invitation.email}")

        account_id = UUID(str(auth_user.id))
        logger.info("Account %s created for %s from invitation %s", account_id, invitation.email, invitation.id)

        consumed = await self._consume(invitation, account_id)

        session = None
        if auth_response.session:
            session = UserSession(
                user_id=account_id,
                email=invitation.email,
                role=invitation.role,
                access_token=auth_response.session.access_token,
                refresh_token=auth_response.session.refresh_token,
                expires_at=auth_response.session.expires_at,
            )

        return RegistrationResult(
            user_id=account_id,
            email=invitation.email,
            role=invitation.role,
            invitation_id=invitation.id,
            invitation_consumed=consumed,
            session=session,
        )

    async def _consume(self, invitation: Invitation, account_id: UUID) -> bool:
        """Mark the invitation used; report instead of raising on failure."""
        try:
            updated = await self.app.invites.mark_used(invitation.token)
        except Exception:
            logger.exception(
                "reconciliation needed: account %s exists but invitation %s could not be marked used",
                account_id,
                invitation.id,
            )
            return False

        if updated is None:
            logger.error(
                "reconciliation needed: account %s exists but invitation %s was not updated",
                account_id,
                invitation.id,
            )
            return False

        logger.info("Invitation %s consumed by account %s", invitation.id, account_id)
        return True
