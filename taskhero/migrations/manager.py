"""
Migration manager for the TaskHero database schema.

PostgREST cannot run DDL, so migrations are applied by pasting the SQL
into the Supabase SQL editor or running it with psql. This module finds
the bundled SQL files, reads which versions a database has recorded in
taskhero_migrations, and renders the pending SQL.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Tuple

from postgrest.exceptions import APIError

if TYPE_CHECKING:
    from ..utils.supabase import TaskHeroSupabaseClient

logger = logging.getLogger(__name__)

MIGRATIONS_TABLE = "taskhero_migrations"
MIGRATIONS_DIR = Path(__file__).parent / "versions"


class Migration:
    """Represents a single database migration."""

    def __init__(self, version: str, name: str, path: Path) -> None:
        self.version = version
        self.name = name
        self.path = path

    @classmethod
    def from_file(cls, path: Path) -> "Migration":
        """
        Create a Migration from a file path.

        Example:
            >>> Migration.from_file(Path("001_initial_schema.sql"))
            Migration(version=001, name=initial_schema)
        """
        parts = path.stem.split("_", 1)

        if len(parts) != 2 or not parts[0].isdigit():
            raise ValueError(f"Invalid migration filename: {path.name}. Expected format: 001_name.sql")

        version, name = parts
        return cls(version=version, name=name, path=path)

    @property
    def label(self) -> str:
        return f"{self.version}_{self.name}"

    def read_sql(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def __repr__(self) -> str:
        return f"Migration(version={self.version}, name={self.name})"


class MigrationManager:
    """
    Reports migration state for a TaskHero database.

    Example:
        ```python
        manager = MigrationManager(app.client)
        for migration, applied in await manager.status():
            print(migration.label, applied)
        print(await manager.pending_sql())
        ```
    """

    def __init__(
        self,
        client: Optional["TaskHeroSupabaseClient"] = None,
        migrations_dir: Path = MIGRATIONS_DIR,
    ) -> None:
        self.client = client
        self.migrations_dir = migrations_dir

    def discover_migrations(self) -> List[Migration]:
        """Bundled migrations, sorted by version."""
        if not self.migrations_dir.exists():
            return []

        migrations = []
        for path in self.migrations_dir.glob("*.sql"):
            try:
                migrations.append(Migration.from_file(path))
            except ValueError:
                logger.warning("Skipping invalid migration file %s", path.name)

        migrations.sort(key=lambda m: m.version)
        return migrations

    async def get_applied_migrations(self) -> List[str]:
        """
        Versions recorded in taskhero_migrations.

        A database where the table does not exist yet has applied nothing.
        """
        if self.client is None:
            return []

        try:
            result = await self.client.table(MIGRATIONS_TABLE).select("version").execute()
        except APIError as exc:
            logger.debug("Migration table unavailable: %s", exc.message)
            return []

        return [row["version"] for row in result.data]

    async def status(self) -> List[Tuple[Migration, bool]]:
        """Each bundled migration with whether it is applied."""
        applied = set(await self.get_applied_migrations())
        return [(m, m.version in applied) for m in self.discover_migrations()]

    async def pending(self, target: Optional[str] = None) -> List[Migration]:
        """Migrations not applied yet, up to target if given."""
        pending = [m for m, applied in await self.status() if not applied]
        if target:
            pending = [m for m in pending if m.version <= target]
        return pending

    async def pending_sql(self, target: Optional[str] = None) -> str:
        """SQL of all pending migrations, in order, ready to run."""
        chunks = []
        for migration in await self.pending(target):
            chunks.append(f"-- {migration.label}\n{migration.read_sql().rstrip()}\n")
        return "\n".join(chunks)
