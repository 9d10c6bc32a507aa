"""
Tests for taskhero.utils module.
"""

from datetime import timezone
from unittest.mock import AsyncMock, patch

import pytest
from postgrest.exceptions import APIError

from taskhero.errors import AuthorizationError, ConflictError
from taskhero.utils.dates import utcnow
from taskhero.utils.supabase import TaskHeroSupabaseClient, raise_for_api_error


class TestTaskHeroSupabaseClient:
    """Tests for TaskHeroSupabaseClient class."""

    @pytest.mark.asyncio
    async def test_create_client(self, taskhero_config):
        with patch("taskhero.utils.supabase.acreate_client", new_callable=AsyncMock) as mock_create:
            mock_create.return_value = AsyncMock()

            client = await TaskHeroSupabaseClient.create(taskhero_config)

            assert client.config == taskhero_config
            assert client._client is mock_create.return_value
            kwargs = mock_create.call_args.kwargs
            assert kwargs["supabase_url"] == "https://test.supabase.co"
            assert kwargs["options"].schema == "public"

    def test_table_method(self, mock_taskhero_supabase_client, mock_supabase_client):
        query_builder = mock_taskhero_supabase_client.table("invitations")
        assert query_builder is mock_supabase_client._query_builders["invitations"]

    def test_auth_and_functions(self, mock_taskhero_supabase_client, mock_supabase_client):
        assert mock_taskhero_supabase_client.auth is mock_supabase_client.auth
        assert mock_taskhero_supabase_client.functions is mock_supabase_client.functions

    @pytest.mark.asyncio
    async def test_close_signs_out_locally(self, mock_taskhero_supabase_client, mock_supabase_client):
        await mock_taskhero_supabase_client.close()
        mock_supabase_client.auth.sign_out.assert_awaited_once_with({"scope": "local"})

    def test_rpc_method(self, mock_taskhero_supabase_client, mock_supabase_client):
        builder = mock_taskhero_supabase_client.rpc("verify_invitation", {"p_token": "abc"})
        assert builder is mock_supabase_client._rpc_builders["verify_invitation"]
        mock_supabase_client.rpc.assert_called_once_with("verify_invitation", {"p_token": "abc"})

    @pytest.mark.asyncio
    async def test_spawn_creates_a_separate_client(self, taskhero_config):
        with patch("taskhero.utils.supabase.acreate_client", new_callable=AsyncMock) as mock_create:
            mock_create.side_effect = [AsyncMock(), AsyncMock()]

            client = await TaskHeroSupabaseClient.create(taskhero_config)
            spawned = await client.spawn()

            assert spawned is not client
            assert spawned._client is not client._client
            assert spawned.config == taskhero_config
            assert mock_create.await_count == 2


class TestRaiseForApiError:
    def test_unique_violation(self):
        exc = APIError({"code": "23505", "message": "duplicate key"})
        with pytest.raises(ConflictError, match="already invited") as info:
            raise_for_api_error(exc, conflict="already invited")
        assert info.value.__cause__ is exc

    def test_insufficient_privilege(self):
        exc = APIError({"code": "42501", "message": "permission denied"})
        with pytest.raises(AuthorizationError, match="permission denied"):
            raise_for_api_error(exc)

    def test_other_errors_pass_through(self):
        exc = APIError({"code": "08006", "message": "connection failure"})
        with pytest.raises(APIError) as info:
            raise_for_api_error(exc, conflict="nope", forbidden="nope")
        assert info.value is exc


def test_utcnow_is_aware():
    assert utcnow().tzinfo == timezone.utc
