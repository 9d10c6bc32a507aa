"""
Profile management for TaskHero.

Profiles live in the user_profiles table, one per auth account, and carry
the role. Only administrators change roles, and never their own.
"""

import logging
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from postgrest.exceptions import APIError

from ..decorators import require_admin, require_session
from ..errors import AuthorizationError, InvalidInputError, NotFoundError
from ..utils.dates import utcnow
from ..utils.supabase import raise_for_api_error
from .models import UserProfile, UserRole, UserSession

if TYPE_CHECKING:
    from ..client import TaskHero

logger = logging.getLogger(__name__)

PROFILES_TABLE = "user_profiles"


class ProfileManager:
    """Reads profiles and lets administrators manage roles."""

    def __init__(self, app: "TaskHero") -> None:
        self.app = app
        self.client = app.client

    @require_session
    async def get(
        self,
        session: UserSession,
        user_id: Optional[UUID] = None,
    ) -> Optional[UserProfile]:
        """
        Get a profile; the session's own profile by default.

        Raises:
            AuthorizationError: If a standard user asks for someone else's profile
        """
        target = user_id or session.user_id
        if str(target) != str(session.user_id) and not session.is_admin:
            raise AuthorizationError("Only administrators can view other profiles")

        result = await self.client.table(PROFILES_TABLE).select("*").eq(
            "id", str(target)
        ).execute()

        if not result.data:
            return None

        return UserProfile(**result.data[0])

    @require_admin
    async def list(self, session: UserSession) -> List[UserProfile]:
        """List all profiles, newest first."""
        result = await self.client.table(PROFILES_TABLE).select(
            "id, email, role, created_at, updated_at"
        ).order("created_at", desc=True).execute()

        return [UserProfile(**row) for row in result.data]

    @require_admin
    async def update_role(
        self,
        session: UserSession,
        user_id: UUID,
        role: UserRole,
    ) -> UserProfile:
        """
        Assign a role to another user.

        Raises:
            InvalidInputError: If role is not a known role
            AuthorizationError: If the administrator targets their own profile
            NotFoundError: If no profile has this ID
        """
        try:
            role = UserRole(role)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown role: {role!r}") from exc

        if str(user_id) == str(session.user_id):
            raise AuthorizationError("Administrators cannot change their own role")

        try:
            result = await self.client.table(PROFILES_TABLE).update({
                "role": role.value,
                "updated_at": utcnow().isoformat(),
            }).eq("id", str(user_id)).execute()
        except APIError as exc:
            raise_for_api_error(exc, forbidden="Only administrators can change roles")

        if not result.data:
            raise NotFoundError(f"User {user_id} not found")

        logger.info("Role of %s set to %s by %s", user_id, role.value, session.user_id)
        return UserProfile(**result.data[0])

    @require_admin
    async def delete(self, session: UserSession, user_id: UUID) -> None:
        """
        Delete a user's profile.

        Raises:
            NotFoundError: If no profile has this ID
        """
        try:
            result = await self.client.table(PROFILES_TABLE).delete().eq(
                "id", str(user_id)
            ).execute()
        except APIError as exc:
            raise_for_api_error(exc, forbidden="Only administrators can delete users")

        if not result.data:
            raise NotFoundError(f"User {user_id} not found")

        logger.info("Profile %s deleted by %s", user_id, session.user_id)
