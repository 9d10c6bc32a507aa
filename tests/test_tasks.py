"""
Tests for taskhero.tasks module.
"""

from datetime import datetime, timezone
from unittest.mock import Mock
from uuid import UUID, uuid4

import pytest

from taskhero.errors import AuthenticationRequiredError, InvalidInputError, NotFoundError
from taskhero.tasks.models import TaskPriority, TaskStatus
from tests.conftest import setup_table_mock


class TestTaskManager:
    """Tests for TaskManager against mocked queries."""

    @pytest.mark.asyncio
    async def test_user_listing_is_scoped(self, app, user_session, sample_task_data):
        query_builder = setup_table_mock(app, "tasks", Mock(data=[sample_task_data]))

        tasks = await app.tasks.list(user_session)

        assert len(tasks) == 1
        query_builder.eq.assert_called_once_with("user_id", str(user_session.user_id))
        query_builder.order.assert_called_with("created_at", desc=True)

    @pytest.mark.asyncio
    async def test_admin_listing_is_unscoped(self, app, admin_session, sample_task_data):
        query_builder = setup_table_mock(app, "tasks", Mock(data=[sample_task_data]))

        await app.tasks.list(admin_session)

        query_builder.eq.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_by_status(self, app, admin_session):
        query_builder = setup_table_mock(app, "tasks", Mock(data=[]))

        await app.tasks.list(admin_session, status=TaskStatus.COMPLETED)

        query_builder.eq.assert_called_once_with("status", "completed")

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, app, user_session, sample_task_data):
        other = {**sample_task_data, "id": str(uuid4()), "title": "Buy milk", "description": None}
        setup_table_mock(app, "tasks", Mock(data=[sample_task_data, other]))

        by_title = await app.tasks.list(user_session, search="RELEASE")
        by_description = await app.tasks.list(user_session, search="invitation")

        assert [t.title for t in by_title] == ["Write release notes"]
        assert [t.title for t in by_description] == ["Write release notes"]

    @pytest.mark.asyncio
    async def test_list_requires_session(self, app):
        with pytest.raises(AuthenticationRequiredError):
            await app.tasks.list(None)

    @pytest.mark.asyncio
    async def test_get_task(self, app, user_session, sample_task_data):
        setup_table_mock(app, "tasks", Mock(data=[sample_task_data]))

        task = await app.tasks.get(user_session, UUID(sample_task_data["id"]))

        assert task.title == "Write release notes"
        assert task.priority == TaskPriority.MEDIUM

    @pytest.mark.asyncio
    async def test_get_missing_task(self, app, user_session):
        assert await app.tasks.get(user_session, uuid4()) is None

    @pytest.mark.asyncio
    async def test_create_task_sets_owner(self, app, user_session, sample_task_data):
        query_builder = setup_table_mock(app, "tasks", Mock(data=[sample_task_data]))
        due = datetime(2024, 1, 8, tzinfo=timezone.utc)

        await app.tasks.create(
            user_session,
            title="Write release notes",
            priority=TaskPriority.HIGH,
            due_date=due,
            category="",
        )

        row = query_builder.insert.call_args.args[0]
        assert row["user_id"] == str(user_session.user_id)
        assert row["status"] == "pending"
        assert row["priority"] == 3
        assert row["due_date"].startswith("2024-01-08")
        assert row["category"] is None

    @pytest.mark.asyncio
    async def test_create_defaults(self, app, user_session, sample_task_data):
        query_builder = setup_table_mock(app, "tasks", Mock(data=[sample_task_data]))

        await app.tasks.create(user_session, title="Plan")

        row = query_builder.insert.call_args.args[0]
        assert row["priority"] == 2
        assert row["status"] == "pending"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fields", [{"title": ""}, {"title": "ok", "priority": 5}, {"title": "ok", "status": "done"}])
    async def test_create_rejects_invalid_fields(self, app, user_session, fields):
        with pytest.raises(InvalidInputError):
            await app.tasks.create(user_session, **fields)

        app.client._client.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_is_scoped_for_users(self, app, user_session, sample_task_data):
        query_builder = setup_table_mock(app, "tasks", Mock(data=[sample_task_data]))
        task_id = UUID(sample_task_data["id"])

        await app.tasks.update(user_session, task_id, title="Renamed")

        query_builder.update.assert_called_once_with({"title": "Renamed"})
        query_builder.eq.assert_any_call("id", str(task_id))
        query_builder.eq.assert_any_call("user_id", str(user_session.user_id))

    @pytest.mark.asyncio
    async def test_update_nothing_rejected(self, app, user_session):
        with pytest.raises(InvalidInputError):
            await app.tasks.update(user_session, uuid4())

    @pytest.mark.asyncio
    async def test_update_unknown_field_rejected(self, app, user_session):
        with pytest.raises(InvalidInputError):
            await app.tasks.update(user_session, uuid4(), user_id=str(uuid4()))

    @pytest.mark.asyncio
    async def test_update_missing_task(self, app, user_session):
        with pytest.raises(NotFoundError):
            await app.tasks.update(user_session, uuid4(), title="Renamed")

    @pytest.mark.asyncio
    async def test_set_status(self, app, user_session, sample_task_data):
        query_builder = setup_table_mock(
            app, "tasks", Mock(data=[{**sample_task_data, "status": "in_progress"}])
        )

        task = await app.tasks.set_status(user_session, UUID(sample_task_data["id"]), TaskStatus.IN_PROGRESS)

        assert task.status == TaskStatus.IN_PROGRESS
        query_builder.update.assert_called_once_with({"status": "in_progress"})

    @pytest.mark.asyncio
    async def test_delete_missing_task(self, app, user_session):
        with pytest.raises(NotFoundError):
            await app.tasks.delete(user_session, uuid4())


class TestTaskScenarios:
    """Ownership rules against the in-memory store."""

    @pytest.mark.asyncio
    async def test_users_only_see_their_own_tasks(self, fake_app, admin_session, user_session):
        await fake_app.tasks.create(admin_session, title="Admin task")
        mine = await fake_app.tasks.create(user_session, title="My task")

        assert [t.id for t in await fake_app.tasks.list(user_session)] == [mine.id]
        assert len(await fake_app.tasks.list(admin_session)) == 2

    @pytest.mark.asyncio
    async def test_users_cannot_touch_others_tasks(self, fake_app, admin_session, user_session):
        theirs = await fake_app.tasks.create(admin_session, title="Admin task")

        with pytest.raises(NotFoundError):
            await fake_app.tasks.update(user_session, theirs.id, title="Hijacked")
        with pytest.raises(NotFoundError):
            await fake_app.tasks.delete(user_session, theirs.id)
        assert await fake_app.tasks.get(user_session, theirs.id) is None

    @pytest.mark.asyncio
    async def test_admin_can_change_any_task(self, fake_app, admin_session, user_session):
        task = await fake_app.tasks.create(user_session, title="Draft")

        updated = await fake_app.tasks.set_status(admin_session, task.id, TaskStatus.COMPLETED)
        assert updated.status == TaskStatus.COMPLETED

        await fake_app.tasks.delete(admin_session, task.id)
        assert await fake_app.tasks.list(user_session) == []
