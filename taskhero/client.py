"""
Main TaskHero client.

This is the primary interface users interact with.
"""

from typing import Optional

from .auth import ProfileManager, RegistrationManager, SessionManager
from .config import TaskHeroConfig, load_config
from .invitations import InvitationManager
from .tasks import TaskManager
from .utils.supabase import TaskHeroSupabaseClient


class TaskHero:
    """
    Main TaskHero client.

    One client corresponds to one signed-in principal, the way one browser
    tab does in the web app: sign in through ``sessions`` and pass the
    returned UserSession to the other managers.

    Example:
        ```python
        from taskhero import TaskHero

        app = await TaskHero.create()

        session = await app.sessions.sign_in_with_password(
            email="admin@example.com", password="secure123"
        )
        created = await app.invites.invite(session, email="new@example.com")
        print(created.link)
        ```
    """

    def __init__(self, config: TaskHeroConfig, client: TaskHeroSupabaseClient) -> None:
        """
        Initialize TaskHero client.

        Args:
            config: TaskHero configuration
            client: Supabase client wrapper

        Note:
            Use TaskHero.create() instead of direct instantiation.
        """
        self.config = config
        self.client = client

        self.sessions = SessionManager(self)
        self.profiles = ProfileManager(self)
        self.invites = InvitationManager(self)
        self.registration = RegistrationManager(self)
        self.tasks = TaskManager(self)

    @classmethod
    async def create(
        cls,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        **kwargs,
    ) -> "TaskHero":
        """
        Create and initialize a TaskHero client.

        Args:
            supabase_url: Supabase project URL (optional, loads from env)
            supabase_key: Supabase anon key (optional, loads from env)
            **kwargs: Additional configuration options

        Returns:
            Initialized TaskHero client

        Raises:
            ValidationError: If required configuration is missing or invalid
        """
        config_kwargs = kwargs.copy()
        if supabase_url:
            config_kwargs["supabase_url"] = supabase_url
        if supabase_key:
            config_kwargs["supabase_key"] = supabase_key

        config = load_config(**config_kwargs)
        client = await TaskHeroSupabaseClient.create(config)

        return cls(config=config, client=client)

    async def close(self) -> None:
        """Close the client and drop its signed-in principal."""
        await self.client.close()

    async def __aenter__(self) -> "TaskHero":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
