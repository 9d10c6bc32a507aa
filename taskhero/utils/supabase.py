"""
Supabase client wrapper for TaskHero.

Provides a thin wrapper around the Supabase AsyncClient with TaskHero-specific
configuration, plus translation of the PostgREST error codes TaskHero
distinguishes.

Package versions this was built against:
- supabase: 2.27.1
- supabase-auth: 2.27.1
- postgrest: 2.27.1

Source references:
- supabase._async.client.AsyncClient: venv/lib/python3.14/site-packages/supabase/_async/client.py
- supabase_auth._async.gotrue_client: venv/lib/python3.14/site-packages/supabase_auth/_async/gotrue_client.py
- postgrest.exceptions.APIError: venv/lib/python3.14/site-packages/postgrest/exceptions.py
"""

from typing import NoReturn, Optional

from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions
from supabase_auth import AsyncMemoryStorage

from ..config import TaskHeroConfig
from ..errors import AuthorizationError, ConflictError

# Postgres SQLSTATE codes surfaced by PostgREST
UNIQUE_VIOLATION = "23505"
INSUFFICIENT_PRIVILEGE = "42501"


class TaskHeroSupabaseClient:
    """
    Wrapper around Supabase AsyncClient with TaskHero-specific configuration.

    This class provides:
    1. Configured client with the project's anon key
    2. Access to the auth API (sign-up, sign-in, password reset)
    3. Access to database queries for the taskhero tables
    4. Access to edge functions (invitation email delivery)

    One wrapper carries one signed-in principal: after a sign-in the
    underlying client sends that user's JWT, and row-level security
    decides what the queries may see.

    Example:
        ```python
        from taskhero.utils.supabase import TaskHeroSupabaseClient
        from taskhero.config import TaskHeroConfig

        config = TaskHeroConfig()
        client = await TaskHeroSupabaseClient.create(config)

        result = await client.table("tasks").select("*").execute()
        ```
    """

    def __init__(self, config: TaskHeroConfig, client: AsyncClient) -> None:
        """
        Initialize the TaskHero Supabase client.

        Args:
            config: TaskHero configuration
            client: Initialized Supabase AsyncClient

        Note:
            Use TaskHeroSupabaseClient.create() instead of direct instantiation.
        """
        self.config = config
        self._client = client

    @classmethod
    async def create(cls, config: TaskHeroConfig) -> "TaskHeroSupabaseClient":
        """
        Create and initialize a TaskHeroSupabaseClient.

        Wraps: supabase._async.client.create_client
        Source: venv/lib/python3.14/site-packages/supabase/_async/client.py

        Args:
            config: TaskHero configuration with Supabase credentials

        Returns:
            Initialized TaskHeroSupabaseClient
        """
        options = AsyncClientOptions(
            schema=config.db_schema,
            storage=AsyncMemoryStorage(),
        )

        client = await acreate_client(
            supabase_url=config.supabase_url,
            supabase_key=config.supabase_key,
            options=options,
        )

        return cls(config=config, client=client)

    @property
    def auth(self):
        """
        Access Supabase Auth client.

        Provides access to:
        - auth.sign_up, auth.sign_in_with_password: account operations
        - auth.get_session, auth.get_user: session management
        - auth.reset_password_for_email, auth.update_user: passwords

        Returns:
            AsyncSupabaseAuthClient
        """
        return self._client.auth

    @property
    def functions(self):
        """
        Access Supabase Edge Functions.

        Returns:
            AsyncFunctionsClient
        """
        return self._client.functions

    def rpc(self, function_name: str, params: Optional[dict] = None):
        """
        Call a Postgres function exposed through PostgREST.

        Wraps: supabase._async.client.AsyncClient.rpc
        Source: venv/lib/python3.14/site-packages/supabase/_async/client.py

        Args:
            function_name: Name of the function (e.g., "verify_invitation")
            params: Named arguments for the function

        Returns:
            Request builder; call execute() to run it
        """
        return self._client.rpc(function_name, params or {})

    def table(self, table_name: str):
        """
        Create a query builder for a specific table.

        Wraps: supabase._async.client.AsyncClient.table
        Source: venv/lib/python3.14/site-packages/supabase/_async/client.py

        Args:
            table_name: Name of the table (e.g., "invitations")

        Returns:
            AsyncRequestBuilder for chaining queries

        Example:
            ```python
            rows = await client.table("invitations").select("*").eq(
                "token", token
            ).execute()
            ```
        """
        return self._client.table(table_name)

    async def spawn(self) -> "TaskHeroSupabaseClient":
        """
        Create another client for the same project, with no signed-in user.

        Auth calls that sign somebody in (sign-up, password checks) run on
        a spawned client so this client keeps acting as its own principal.
        """
        return await type(self).create(self.config)

    async def close(self) -> None:
        """
        Close the client and drop the signed-in principal.

        Only this client's session is revoked; the user stays signed in
        elsewhere.

        Should be called when done using the client.
        """
        # The client keeps no pooled connections in 2.27.1; forgetting the
        # session is all there is to release.
        await self._client.auth.sign_out({"scope": "local"})


def raise_for_api_error(
    exc: APIError,
    conflict: Optional[str] = None,
    forbidden: Optional[str] = None,
) -> NoReturn:
    """
    Re-raise a PostgREST error, translating the codes callers branch on.

    Args:
        exc: The APIError caught from a query
        conflict: Message for a unique violation (defaults to the server's)
        forbidden: Message for a row-level security rejection

    Raises:
        ConflictError: On unique violation (23505)
        AuthorizationError: On insufficient privilege (42501)
        APIError: Anything else, unchanged
    """
    if exc.code == UNIQUE_VIOLATION:
        raise ConflictError(conflict or exc.message) from exc
    if exc.code == INSUFFICIENT_PRIVILEGE:
        raise AuthorizationError(forbidden or exc.message) from exc
    raise exc

