"""
Pytest configuration and fixtures for TaskHero tests.

Provides a mock Supabase client, an in-memory fake Supabase, and test
fixtures.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from taskhero.auth.models import UserRole, UserSession
from taskhero.client import TaskHero
from taskhero.config import TaskHeroConfig
from taskhero.utils.dates import utcnow
from taskhero.utils.supabase import TaskHeroSupabaseClient

from tests.fakes import FakeSupabase


def make_mock_supabase_client():
    """Create a mock Supabase client."""
    client = AsyncMock()

    client.auth = AsyncMock()
    client.functions = AsyncMock()
    client.functions.invoke = AsyncMock(return_value={"id": "msg_123"})

    # Store query builders by table name so we can configure them
    query_builders = {}

    def table_mock(table_name: str):
        if table_name not in query_builders:
            query_builder = Mock()
            # Make all methods return self for chaining
            query_builder.select = Mock(return_value=query_builder)
            query_builder.insert = Mock(return_value=query_builder)
            query_builder.update = Mock(return_value=query_builder)
            query_builder.delete = Mock(return_value=query_builder)
            query_builder.eq = Mock(return_value=query_builder)
            query_builder.order = Mock(return_value=query_builder)
            query_builder.lt = Mock(return_value=query_builder)
            query_builder.lte = Mock(return_value=query_builder)
            # Default execute returns empty result
            query_builder.execute = AsyncMock(return_value=Mock(data=[]))
            query_builders[table_name] = query_builder
        return query_builders[table_name]

    client.table = Mock(side_effect=table_mock)
    client._query_builders = query_builders  # Expose for test configuration

    rpc_builders = {}

    def rpc_mock(function_name: str, params=None):
        if function_name not in rpc_builders:
            rpc_builder = Mock()
            rpc_builder.execute = AsyncMock(return_value=Mock(data=[]))
            rpc_builders[function_name] = rpc_builder
        return rpc_builders[function_name]

    client.rpc = Mock(side_effect=rpc_mock)
    client._rpc_builders = rpc_builders

    return client


@pytest.fixture
def mock_supabase_client():
    return make_mock_supabase_client()


@pytest.fixture
def spawned_supabase_client():
    """Mock behind the client returned by TaskHeroSupabaseClient.spawn()."""
    return make_mock_supabase_client()


@pytest.fixture
def taskhero_config():
    """Create a test TaskHeroConfig."""
    return TaskHeroConfig(
        supabase_url="https://test.supabase.co",
        supabase_key="test-anon-key-12345678901234567890",
        site_url="https://tasks.example.com",
        debug=True,
    )


@pytest.fixture
def mock_taskhero_supabase_client(mock_supabase_client, spawned_supabase_client, taskhero_config):
    """Create a TaskHeroSupabaseClient around the mock client."""
    client = TaskHeroSupabaseClient(config=taskhero_config, client=mock_supabase_client)
    client.spawn = AsyncMock(
        return_value=TaskHeroSupabaseClient(config=taskhero_config, client=spawned_supabase_client)
    )
    return client


@pytest.fixture
def app(mock_taskhero_supabase_client, taskhero_config):
    """Create a test TaskHero instance backed by the mock client."""
    return TaskHero(config=taskhero_config, client=mock_taskhero_supabase_client)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def fake_app(fake_supabase, taskhero_config):
    """A TaskHero instance backed by the in-memory fake."""
    client = TaskHeroSupabaseClient(config=taskhero_config, client=fake_supabase)
    client.spawn = AsyncMock(
        side_effect=lambda: TaskHeroSupabaseClient(config=taskhero_config, client=fake_supabase.spawn())
    )
    return TaskHero(config=taskhero_config, client=client)


def setup_table_mock(app, table_name, execute_return_value):
    """
    Set up a table mock with a specific execute return value.

    Args:
        app: TaskHero instance
        table_name: Name of the table
        execute_return_value: Mock result (or exception) for execute()
    """
    query_builder = app.client._client.table(table_name)
    if isinstance(execute_return_value, Exception):
        query_builder.execute = AsyncMock(side_effect=execute_return_value)
    else:
        query_builder.execute = AsyncMock(return_value=execute_return_value)
    return query_builder


def setup_rpc_mock(app, function_name, execute_return_value):
    """Same as setup_table_mock, for a database function called through rpc()."""
    rpc_builder = app.client._client.rpc(function_name)
    app.client._client.rpc.reset_mock()
    if isinstance(execute_return_value, Exception):
        rpc_builder.execute = AsyncMock(side_effect=execute_return_value)
    else:
        rpc_builder.execute = AsyncMock(return_value=execute_return_value)
    return rpc_builder


@pytest.fixture
def admin_session():
    return UserSession(
        user_id=uuid4(),
        email="admin@example.com",
        role=UserRole.ADMIN,
        access_token="admin-access-token",
    )


@pytest.fixture
def user_session():
    return UserSession(
        user_id=uuid4(),
        email="user@example.com",
        role=UserRole.USER,
        access_token="user-access-token",
    )


@pytest.fixture
def sample_invitation_data(admin_session):
    """Create sample invitation row data."""
    created_at = utcnow()
    return {
        "id": str(uuid4()),
        "email": "invited@example.com",
        "role": "user",
        "token": "dGVzdC10b2tlbi0xMjM0NTY3ODkwYWJjZGVmZ2hpamts",
        "created_by": str(admin_session.user_id),
        "created_at": created_at.isoformat(),
        "expires_at": (created_at + timedelta(days=7)).isoformat(),
        "used": False,
    }


@pytest.fixture
def sample_profile_data():
    now = utcnow().isoformat()
    return {
        "id": str(uuid4()),
        "email": "member@example.com",
        "role": "user",
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def sample_task_data(user_session):
    return {
        "id": str(uuid4()),
        "title": "Write release notes",
        "description": "Cover the invitation changes",
        "status": "pending",
        "due_date": None,
        "priority": 2,
        "category": "docs",
        "user_id": str(user_session.user_id),
        "created_at": utcnow().isoformat(),
    }
