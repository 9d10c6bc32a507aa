"""
Session management for TaskHero.

Handles signing in and out, resolving access tokens to sessions, and
password maintenance.

Wraps: supabase_auth._async.gotrue_client.AsyncGoTrueClient
Source: venv/lib/python3.14/site-packages/supabase_auth/_async/gotrue_client.py
"""

import logging
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from pydantic import ValidationError
from supabase_auth.errors import AuthApiError, AuthError
from supabase_auth.types import SignInWithPasswordCredentials

from ..decorators import require_session
from ..errors import AuthorizationError, InvalidInputError
from .models import PasswordChange, UserRole, UserSession
from .profiles import PROFILES_TABLE

if TYPE_CHECKING:
    from ..client import TaskHero

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Manages authentication sessions.

    Provides methods for signing in, signing out, and resolving sessions.
    The returned UserSession is what every other manager takes as the
    acting principal.
    """

    def __init__(self, app: "TaskHero") -> None:
        """
        Initialize SessionManager.

        Args:
            app: Main TaskHero client instance
        """
        self.app = app
        self.client = app.client
        self.config = app.config

    async def _load_role(self, user_id) -> UserRole:
        """Read the role from user_profiles, defaulting to a standard user."""
        result = await self.client.table(PROFILES_TABLE).select("role").eq(
            "id", str(user_id)
        ).execute()

        if not result.data:
            logger.warning("No profile for account %s yet; treating it as a standard user", user_id)
            return UserRole.USER

        return UserRole(result.data[0]["role"])

    async def _build_session(self, auth_user, auth_session) -> UserSession:
        role = await self._load_role(auth_user.id)
        return UserSession(
            user_id=UUID(str(auth_user.id)),
            email=auth_user.email,
            role=role,
            access_token=auth_session.access_token,
            refresh_token=auth_session.refresh_token,
            expires_at=auth_session.expires_at,
            token_type=auth_session.token_type or "bearer",
        )

    async def sign_in_with_password(self, email: str, password: str) -> UserSession:
        """
        Sign in a user with email and password.

        Wraps: supabase_auth._async.gotrue_client.AsyncGoTrueClient.sign_in_with_password
        Source: venv/lib/python3.14/site-packages/supabase_auth/_async/gotrue_client.py

        Args:
            email: User email address
            password: User password

        Returns:
            UserSession with access token and role

        Raises:
            AuthApiError: If credentials are invalid

        Example:
            ```python
            session = await app.sessions.sign_in_with_password(
                email="user@example.com",
                password="secure123"
            )
            print(f"Logged in as: {session.email} ({session.role.value})")
            ```
        """
        credentials: SignInWithPasswordCredentials = {
            "email": email,
            "password": password,
        }

        auth_response = await self.client.auth.sign_in_with_password(credentials)
        session = await self._build_session(auth_response.user, auth_response.session)
        logger.info("Signed in %s", session.email)
        return session

    async def get_session(self) -> Optional[UserSession]:
        """
        Get the session the client currently holds, if any.

        Wraps: supabase_auth._async.gotrue_client.AsyncGoTrueClient.get_session
        Source: venv/lib/python3.14/site-packages/supabase_auth/_async/gotrue_client.py

        Returns:
            UserSession if signed in, None otherwise
        """
        auth_session = await self.client.auth.get_session()

        if not auth_session:
            return None

        return await self._build_session(auth_session.user, auth_session)

    async def get_user_from_token(self, token: str) -> Optional[UserSession]:
        """
        Resolve an access token to a session.

        Wraps: supabase_auth._async.gotrue_client.AsyncGoTrueClient.get_user
        Source: venv/lib/python3.14/site-packages/supabase_auth/_async/gotrue_client.py

        Args:
            token: JWT access token

        Returns:
            UserSession if the token is valid, None otherwise
        """
        try:
            auth_user_response = await self.client.auth.get_user(token)
        except AuthError:
            logger.debug("Access token rejected by auth provider", exc_info=True)
            return None

        if not auth_user_response or not auth_user_response.user:
            return None

        auth_user = auth_user_response.user
        return UserSession(
            user_id=UUID(str(auth_user.id)),
            email=auth_user.email,
            role=await self._load_role(auth_user.id),
            access_token=token,
        )

    async def sign_out(self) -> None:
        """
        Sign out the client's current session.

        Wraps: supabase_auth._async.gotrue_client.AsyncGoTrueClient.sign_out
        Source: venv/lib/python3.14/site-packages/supabase_auth/_async/gotrue_client.py
        """
        await self.client.auth.sign_out({"scope": "local"})

    async def send_password_reset(self, email: str) -> None:
        """
        Email a password-reset link pointing at <site_url>/reset-password.

        Wraps: supabase_auth._async.gotrue_client.AsyncGoTrueClient.reset_password_for_email
        Source: venv/lib/python3.14/site-packages/supabase_auth/_async/gotrue_client.py
        """
        await self.client.auth.reset_password_for_email(
            email, {"redirect_to": self.config.reset_password_url}
        )
        logger.info("Password reset requested for %s", email)

    @require_session
    async def change_password(
        self,
        session: UserSession,
        current_password: str,
        new_password: str,
    ) -> None:
        """
        Change the signed-in user's password.

        The current password is checked by signing in with it on a spawned
        client, which then performs the update as that user. The app's own
        client and its principal are left untouched.

        Raises:
            InvalidInputError: If the new password is shorter than 6 characters
            AuthorizationError: If the current password is wrong
        """
        try:
            PasswordChange(current_password=current_password, new_password=new_password)
        except ValidationError as exc:
            raise InvalidInputError("New password must be at least 6 characters") from exc

        checker = await self.client.spawn()
        try:
            try:
                await checker.auth.sign_in_with_password(
                    {"email": session.email, "password": current_password}
                )
            except AuthApiError as exc:
                raise AuthorizationError("Current password is incorrect") from exc

            await checker.auth.update_user({"password": new_password})
        finally:
            await checker.close()

        logger.info("Password changed for %s", session.email)
