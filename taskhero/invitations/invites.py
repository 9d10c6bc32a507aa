"""
Invitation management for TaskHero.

Handles issuing, verifying, consuming, listing and deleting invitations.
An invitation is a row in the invitations table whose token is the bearer
credential in the registration link ``<site_url>/login?token=<token>``.

State of a token, evaluated fresh on every verification:

    not_found     no row carries the token
    already_used  a row carries it and used = true
    expired       unused, but expires_at <= now
    valid         unused and now < expires_at
"""

import logging
import re
import secrets
from typing import TYPE_CHECKING, Iterable, List, Optional
from urllib.parse import urlencode
from uuid import UUID

import httpx
from postgrest.exceptions import APIError
from pydantic import ValidationError

from ..auth.models import UserRole, UserSession
from ..decorators import require_admin
from ..errors import (
    EmailDeliveryError,
    InvalidInputError,
    InvitationStateError,
    NotFoundError,
)
from ..utils.dates import utcnow
from ..utils.supabase import raise_for_api_error
from .email import InvitationMailer
from .models import (
    INVITATION_TTL,
    CreatedInvitation,
    CreateInvitationRequest,
    EmailDelivery,
    Invitation,
    InvitationStatus,
    TokenVerification,
    ValidInvitation,
    VerificationFailure,
    VerificationFailureReason,
)

if TYPE_CHECKING:
    from datetime import datetime

    from ..client import TaskHero

logger = logging.getLogger(__name__)

INVITATIONS_TABLE = "invitations"

# security definer functions; the table itself is readable by admins only
VERIFY_FUNCTION = "verify_invitation"
CONSUME_FUNCTION = "consume_invitation"

# secrets.token_urlsafe(32) -> 43 characters, 256 bits of entropy
TOKEN_BYTES = 32
MAX_TOKEN_LENGTH = 256
_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def is_well_formed_token(token: object) -> bool:
    """Cheap shape check done before a token is sent to the database."""
    return (
        isinstance(token, str)
        and 0 < len(token) <= MAX_TOKEN_LENGTH
        and _TOKEN_PATTERN.match(token) is not None
    )


def resolve_verification(
    invitations: Iterable[Invitation],
    now: Optional["datetime"] = None,
) -> TokenVerification:
    """
    Decide what a set of rows sharing one token means.

    Normally at most one row matches. When several do, a used row wins
    over an expired one, and an expired one over a valid one.
    """
    invitations = list(invitations)
    now = now or utcnow()

    if not invitations:
        return VerificationFailure(reason=VerificationFailureReason.NOT_FOUND)

    if any(invitation.used for invitation in invitations):
        return VerificationFailure(reason=VerificationFailureReason.ALREADY_USED)

    if any(invitation.is_expired(now) for invitation in invitations):
        return VerificationFailure(reason=VerificationFailureReason.EXPIRED)

    return ValidInvitation(invitation=invitations[0])


class InvitationManager:
    """
    Manages invitation operations.

    The invitation flow:
    1. An administrator creates an invitation with email and role
    2. A random token is stored in the invitations table, valid 7 days
    3. The registration link is emailed via the send-invitation function
    4. The invitee opens the link; the token is verified
    5. The invitee registers and the invitation is marked used
    """

    def __init__(self, app: "TaskHero") -> None:
        """
        Initialize InvitationManager.

        Args:
            app: Main TaskHero client instance
        """
        self.app = app
        self.client = app.client
        self.config = app.config
        self.mailer = InvitationMailer(self.client, self.config.invitation_function)

    def _generate_token(self, nbytes: int = TOKEN_BYTES) -> str:
        """Generate a secure random token for invitations."""
        return secrets.token_urlsafe(nbytes)

    def build_link(self, token: str) -> str:
        """Build the shareable registration link for a token."""
        return f"{self.config.login_url}?{urlencode({'token': token})}"

    @require_admin
    async def create(
        self,
        session: UserSession,
        email: str,
        role: UserRole = UserRole.USER,
    ) -> CreatedInvitation:
        """
        Create an invitation and its shareable link.

        Args:
            session: Acting administrator
            email: Email address to invite
            role: Role granted when the invitation is used

        Returns:
            CreatedInvitation with the stored row and the link

        Raises:
            AuthorizationError: If the session is not an administrator
            InvalidInputError: If email or role is malformed
            ConflictError: If the database rejects a duplicate invitation
            APIError: Any other storage failure, unchanged

        Example:
            ```python
            created = await app.invites.create(
                session,
                email="newuser@example.com",
                role=UserRole.ADMIN,
            )
            print(created.link)
            ```
        """
        try:
            request = CreateInvitationRequest(email=email, role=role)
        except ValidationError as exc:
            raise InvalidInputError(f"Invalid invitation for {email!r}: {exc}") from exc

        token = self._generate_token()
        created_at = utcnow()
        expires_at = created_at + INVITATION_TTL

        invitation_data = {
            "email": request.email,
            "token": token,
            "role": request.role.value,
            "created_by": str(session.user_id),
            "created_at": created_at.isoformat(),
            "expires_at": expires_at.isoformat(),
            "used": False,
        }

        try:
            result = await self.client.table(INVITATIONS_TABLE).insert(
                invitation_data
            ).execute()
        except APIError as exc:
            raise_for_api_error(
                exc,
                conflict=f"{request.email} has already been invited",
                forbidden="Only administrators can create invitations",
            )

        invitation = Invitation(**result.data[0])
        logger.info(
            "Invitation %s created for %s (role=%s) by %s",
            invitation.id,
            invitation.email,
            invitation.role.value,
            session.user_id,
        )

        return CreatedInvitation(
            invitation=invitation,
            link=self.build_link(invitation.token),
        )

    async def invite(
        self,
        session: UserSession,
        email: str,
        role: UserRole = UserRole.USER,
        send_email: bool = True,
    ) -> CreatedInvitation:
        """
        Create an invitation and email the link to the invitee.

        A failed email does not undo the invitation: the link is still
        returned and can be copied from the listing later.

        Args:
            session: Acting administrator
            email: Email address to invite
            role: Role granted when the invitation is used
            send_email: Whether to call the email function at all

        Returns:
            CreatedInvitation; email_sent reports the delivery outcome
        """
        created = await self.create(session, email, role)

        if not send_email:
            return created

        try:
            await self.send_email(created.invitation)
        except EmailDeliveryError:
            logger.warning(
                "Invitation %s stands but its email to %s was not sent",
                created.invitation.id,
                created.invitation.email,
                exc_info=True,
            )
            return created.model_copy(update={"email_sent": False})

        return created.model_copy(update={"email_sent": True})

    async def send_email(self, invitation: Invitation) -> EmailDelivery:
        """
        Email the registration link of an invitation.

        Raises:
            EmailDeliveryError: If the email function failed
        """
        return await self.mailer.send(
            invitation.email,
            self.build_link(invitation.token),
            invitation.role,
        )

    @require_admin
    async def resend_email(
        self,
        session: UserSession,
        invitation_id: UUID,
    ) -> EmailDelivery:
        """
        Email the same link again for a still-valid invitation.

        The expiry is not extended.

        Raises:
            NotFoundError: If the invitation does not exist
            InvitationStateError: If it is used or expired
            EmailDeliveryError: If the email function failed
        """
        invitation = await self.get(session, invitation_id)

        if not invitation:
            raise NotFoundError(f"Invitation {invitation_id} not found")

        status = invitation.status()
        if status != InvitationStatus.ACTIVE:
            raise InvitationStateError(
                f"Cannot resend an invitation that is {status.value}"
            )

        return await self.send_email(invitation)

    @require_admin
    async def get(
        self,
        session: UserSession,
        invitation_id: UUID,
    ) -> Optional[Invitation]:
        """
        Get an invitation by ID.

        Returns:
            Invitation instance or None if not found
        """
        result = await self.client.table(INVITATIONS_TABLE).select("*").eq(
            "id", str(invitation_id)
        ).execute()

        if not result.data:
            return None

        return Invitation(**result.data[0])

    @require_admin
    async def list(
        self,
        session: UserSession,
        status: Optional[InvitationStatus] = None,
    ) -> List[Invitation]:
        """
        List invitations, newest first.

        Args:
            session: Acting administrator
            status: Only return invitations currently in this status

        Returns:
            List of Invitation instances
        """
        result = await self.client.table(INVITATIONS_TABLE).select("*").order(
            "created_at", desc=True
        ).execute()

        invitations = [Invitation(**row) for row in result.data]

        if status is not None:
            now = utcnow()
            invitations = [inv for inv in invitations if inv.status(now) == status]

        return invitations

    @require_admin
    async def delete(self, session: UserSession, invitation_id: UUID) -> None:
        """
        Permanently delete an invitation.

        Raises:
            NotFoundError: If no invitation has this ID
        """
        try:
            result = await self.client.table(INVITATIONS_TABLE).delete().eq(
                "id", str(invitation_id)
            ).execute()
        except APIError as exc:
            raise_for_api_error(exc, forbidden="Only administrators can delete invitations")

        if not result.data:
            raise NotFoundError(f"Invitation {invitation_id} not found")

        logger.info("Invitation %s deleted by %s", invitation_id, session.user_id)

    @require_admin
    async def purge_expired(self, session: UserSession) -> int:
        """
        Delete all unused invitations whose expiry has passed.

        Returns:
            Number of invitations deleted
        """
        now = utcnow().isoformat()

        result = await self.client.table(INVITATIONS_TABLE).delete().eq(
            "used", False
        ).lte("expires_at", now).execute()

        count = len(result.data or [])
        logger.info("Purged %d expired invitation(s)", count)
        return count

    async def verify_token(self, token: str) -> TokenVerification:
        """
        Resolve what a registration token currently grants.

        Never raises for expected states; each outcome is returned so the
        caller can show the matching message. Nothing is cached and
        nothing is written.

        Args:
            token: Token taken from the registration link

        Returns:
            ValidInvitation, or VerificationFailure with a reason of
            not_found, already_used, expired or database_error

        Example:
            ```python
            verification = await app.invites.verify_token(token)
            if verification.ok:
                print(f"Registering {verification.email} as {verification.role}")
            else:
                print(verification.message)
            ```
        """
        if not is_well_formed_token(token):
            logger.debug("Malformed invitation token rejected without lookup")
            return VerificationFailure(reason=VerificationFailureReason.NOT_FOUND)

        try:
            result = await self.client.rpc(VERIFY_FUNCTION, {"p_token": token}).execute()
        except (APIError, httpx.HTTPError) as exc:
            logger.exception("Invitation lookup failed")
            return VerificationFailure(
                reason=VerificationFailureReason.DATABASE_ERROR,
                cause=exc,
            )

        verification = resolve_verification(Invitation(**row) for row in result.data)
        if not verification.ok:
            logger.info("Invitation token rejected: %s", verification.reason.value)
        return verification

    async def mark_used(self, token: str) -> Optional[Invitation]:
        """
        Mark the invitation carrying a token used.

        Runs in the database, so it works without a signed-in session (a
        sign-up awaiting email confirmation has none). Only an unused
        invitation whose email already has an account is updated, so a
        repeated call never changes a consumed invitation.

        Args:
            token: Token the account was registered with

        Returns:
            The updated Invitation, or None if no unused row matched
        """
        result = await self.client.rpc(CONSUME_FUNCTION, {"p_token": token}).execute()

        if not result.data:
            return None

        return Invitation(**result.data[0])
