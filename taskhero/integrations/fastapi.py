"""
FastAPI integration for TaskHero.

Provides client lifetime, bearer-token session dependencies and error
translation for FastAPI applications.

Example:
    ```python
    from fastapi import Depends, FastAPI
    from taskhero.integrations.fastapi import TaskHeroFastAPI

    integration = TaskHeroFastAPI()
    app = FastAPI(lifespan=integration.lifespan)
    integration.install_error_handlers(app)

    @app.get("/tasks")
    async def list_tasks(session = Depends(integration.require_auth())):
        return await integration.taskhero.tasks.list(session)

    @app.post("/invitations")
    async def invite(email: str, session = Depends(integration.require_admin())):
        created = await integration.taskhero.invites.invite(session, email)
        return {"link": created.link, "email_sent": created.email_sent}
    ```
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

try:
    from fastapi import Depends, FastAPI, HTTPException, Request
    from fastapi.responses import JSONResponse
    from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
except ImportError:
    raise ImportError(
        "FastAPI is required for this integration. "
        "Install it with: pip install taskhero[fastapi]"
    )

from ..auth.models import UserSession
from ..client import TaskHero
from ..errors import (
    AuthenticationRequiredError,
    AuthorizationError,
    ConflictError,
    InvalidInputError,
    InvitationStateError,
    NotFoundError,
    TaskHeroError,
)

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# Most specific first
ERROR_STATUS_CODES = (
    (AuthenticationRequiredError, 401),
    (AuthorizationError, 403),
    (InvalidInputError, 422),
    (NotFoundError, 404),
    (ConflictError, 409),
    (InvitationStateError, 410),
)


def status_code_for(exc: TaskHeroError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


class TaskHeroFastAPI:
    """
    FastAPI integration for TaskHero.

    Provides:
    - TaskHero client lifecycle management through a lifespan
    - Dependencies resolving the bearer token to a UserSession
    - Translation of TaskHero errors into HTTP responses

    The server-side client should be configured with a key that can read
    user_profiles for any account, since roles are looked up per request.
    """

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        taskhero: Optional[TaskHero] = None,
    ) -> None:
        """
        Initialize TaskHeroFastAPI integration.

        Args:
            supabase_url: Supabase URL (optional, loads from env)
            supabase_key: Supabase key (optional, loads from env)
            taskhero: An already created client to use instead
        """
        self.supabase_url = supabase_url
        self.supabase_key = supabase_key
        self._taskhero = taskhero

    async def setup(self) -> None:
        """Initialize the TaskHero client."""
        if self._taskhero is None:
            self._taskhero = await TaskHero.create(
                supabase_url=self.supabase_url,
                supabase_key=self.supabase_key,
            )

    async def teardown(self) -> None:
        """Close the TaskHero client."""
        if self._taskhero:
            await self._taskhero.close()
            self._taskhero = None

    @asynccontextmanager
    async def lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        await self.setup()
        try:
            yield
        finally:
            await self.teardown()

    @property
    def taskhero(self) -> TaskHero:
        """Get the TaskHero instance."""
        if not self._taskhero:
            raise RuntimeError("TaskHero not initialized. Call setup() first.")
        return self._taskhero

    def get_taskhero(self) -> TaskHero:
        """Dependency returning the TaskHero instance."""
        return self.taskhero

    def install_error_handlers(self, app: FastAPI) -> None:
        """Answer TaskHero errors with a JSON error and a matching status code."""

        async def handle(request: Request, exc: TaskHeroError) -> JSONResponse:
            status_code = status_code_for(exc)
            if status_code >= 500:
                logger.error("Unhandled TaskHero error on %s", request.url.path, exc_info=exc)
            return JSONResponse(status_code=status_code, content={"detail": str(exc)})

        app.add_exception_handler(TaskHeroError, handle)

    def require_auth(self) -> Callable:
        """
        Dependency that requires authentication.

        Returns the caller's UserSession or raises 401.
        """

        async def dependency(
            credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        ) -> UserSession:
            if not credentials:
                raise HTTPException(
                    status_code=401,
                    detail="Not authenticated",
                    headers={"WWW-Authenticate": "Bearer"},
                )

            session = await self.taskhero.sessions.get_user_from_token(credentials.credentials)

            if not session:
                raise HTTPException(
                    status_code=401,
                    detail="Invalid or expired token",
                    headers={"WWW-Authenticate": "Bearer"},
                )

            return session

        return dependency

    def require_admin(self) -> Callable:
        """Dependency that requires an administrator session, 403 otherwise."""

        async def dependency(
            session: UserSession = Depends(self.require_auth()),
        ) -> UserSession:
            if not session.is_admin:
                raise HTTPException(status_code=403, detail="Administrator role required")
            return session

        return dependency
