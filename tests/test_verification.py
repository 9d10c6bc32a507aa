"""
Tests for invitation token verification.
"""

from datetime import timedelta
from unittest.mock import Mock
from uuid import uuid4

import httpx
import pytest
from postgrest.exceptions import APIError

from taskhero.auth.models import UserRole
from taskhero.invitations.invites import resolve_verification
from taskhero.invitations.models import (
    VERIFICATION_MESSAGES,
    Invitation,
    ValidInvitation,
    VerificationFailure,
    VerificationFailureReason,
)
from taskhero.utils.dates import utcnow
from tests.conftest import setup_rpc_mock


def make_invitation(sample_invitation_data, **changes):
    return Invitation(**{**sample_invitation_data, "id": str(uuid4()), **changes})


class TestResolveVerification:
    """Precedence of outcomes for the rows sharing a token."""

    def test_no_rows_is_not_found(self):
        result = resolve_verification([])
        assert result.ok is False
        assert result.reason == VerificationFailureReason.NOT_FOUND

    def test_fresh_row_is_valid(self, sample_invitation_data):
        invitation = make_invitation(sample_invitation_data)
        result = resolve_verification([invitation])
        assert isinstance(result, ValidInvitation)
        assert result.invitation is invitation

    def test_used_beats_expired(self, sample_invitation_data):
        past = (utcnow() - timedelta(days=1)).isoformat()
        invitation = make_invitation(sample_invitation_data, used=True, expires_at=past)
        result = resolve_verification([invitation])
        assert result.reason == VerificationFailureReason.ALREADY_USED

    def test_unused_past_expiry_is_expired(self, sample_invitation_data):
        past = (utcnow() - timedelta(seconds=1)).isoformat()
        result = resolve_verification([make_invitation(sample_invitation_data, expires_at=past)])
        assert result.reason == VerificationFailureReason.EXPIRED

    def test_expiry_boundary_is_expired(self, sample_invitation_data):
        invitation = make_invitation(sample_invitation_data)
        result = resolve_verification([invitation], now=invitation.expires_at)
        assert result.reason == VerificationFailureReason.EXPIRED

    def test_any_used_row_wins(self, sample_invitation_data):
        rows = [
            make_invitation(sample_invitation_data),
            make_invitation(sample_invitation_data, used=True),
        ]
        assert resolve_verification(rows).reason == VerificationFailureReason.ALREADY_USED

    def test_any_expired_row_beats_valid(self, sample_invitation_data):
        past = (utcnow() - timedelta(days=2)).isoformat()
        rows = [
            make_invitation(sample_invitation_data),
            make_invitation(sample_invitation_data, expires_at=past),
        ]
        assert resolve_verification(rows).reason == VerificationFailureReason.EXPIRED


class TestMessages:
    def test_every_outcome_has_a_distinct_message(self):
        messages = [VERIFICATION_MESSAGES["valid"]] + [
            VerificationFailure(reason=reason).message for reason in VerificationFailureReason
        ]
        assert len(set(messages)) == len(messages)


class TestVerifyToken:
    """Tests for InvitationManager.verify_token against a mocked database function."""

    @pytest.mark.asyncio
    async def test_valid_token_returns_email_and_role(self, app, sample_invitation_data):
        data = {**sample_invitation_data, "email": "a@x.com", "role": "admin"}
        setup_rpc_mock(app, "verify_invitation", Mock(data=[data]))

        result = await app.invites.verify_token(data["token"])

        assert result.ok is True
        assert result.email == "a@x.com"
        assert result.role == UserRole.ADMIN
        app.client._client.rpc.assert_called_once_with("verify_invitation", {"p_token": data["token"]})
        app.client._client.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_token_is_not_found(self, app):
        result = await app.invites.verify_token("never-issued-token")
        assert result.reason == VerificationFailureReason.NOT_FOUND

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["", None, "has spaces", "a" * 257, "semi;colon"])
    async def test_malformed_token_skips_storage(self, app, token):
        result = await app.invites.verify_token(token)

        assert result.reason == VerificationFailureReason.NOT_FOUND
        app.client._client.table.assert_not_called()
        app.client._client.rpc.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            APIError({"code": "08006", "message": "connection failure"}),
            httpx.ConnectError("connection refused"),
        ],
    )
    async def test_storage_failure_is_database_error(self, app, error):
        setup_rpc_mock(app, "verify_invitation", error)

        result = await app.invites.verify_token("some-token")

        assert result.ok is False
        assert result.reason == VerificationFailureReason.DATABASE_ERROR
        assert result.cause is error
        assert "try again" in result.message

    @pytest.mark.asyncio
    async def test_database_error_cause_not_serialized(self, app):
        setup_rpc_mock(app, "verify_invitation", httpx.ConnectError("down"))

        result = await app.invites.verify_token("some-token")

        assert "cause" not in result.model_dump()


class TestVerificationScenarios:
    """End-to-end scenarios against the in-memory store."""

    @pytest.mark.asyncio
    async def test_never_issued_token(self, fake_app):
        result = await fake_app.invites.verify_token("x" * 43)
        assert result.reason == VerificationFailureReason.NOT_FOUND

    @pytest.mark.asyncio
    async def test_empty_token_makes_no_query(self, fake_app, fake_supabase):
        result = await fake_app.invites.verify_token("")

        assert result.reason == VerificationFailureReason.NOT_FOUND
        assert fake_supabase.queries == []

    @pytest.mark.asyncio
    async def test_manually_expired_invitation(self, fake_app, fake_supabase, admin_session):
        created = await fake_app.invites.create(admin_session, "late@x.com")
        row = fake_supabase.rows("invitations")[0]
        row["expires_at"] = (utcnow() - timedelta(days=1)).isoformat()

        result = await fake_app.invites.verify_token(created.invitation.token)

        assert result.reason == VerificationFailureReason.EXPIRED

    @pytest.mark.asyncio
    async def test_used_and_expired_reports_used(self, fake_app, fake_supabase, admin_session):
        created = await fake_app.invites.create(admin_session, "late@x.com")
        row = fake_supabase.rows("invitations")[0]
        row["expires_at"] = (utcnow() - timedelta(days=1)).isoformat()
        row["used"] = True

        result = await fake_app.invites.verify_token(created.invitation.token)

        assert result.reason == VerificationFailureReason.ALREADY_USED

    @pytest.mark.asyncio
    async def test_deleted_invitation(self, fake_app, admin_session):
        created = await fake_app.invites.create(admin_session, "gone@x.com")

        await fake_app.invites.delete(admin_session, created.invitation.id)

        assert created.invitation.id not in [i.id for i in await fake_app.invites.list(admin_session)]
        result = await fake_app.invites.verify_token(created.invitation.token)
        assert result.reason == VerificationFailureReason.NOT_FOUND

    @pytest.mark.asyncio
    async def test_verification_does_not_write(self, fake_app, fake_supabase, admin_session):
        created = await fake_app.invites.create(admin_session, "a@x.com")
        fake_supabase.queries.clear()

        await fake_app.invites.verify_token(created.invitation.token)
        await fake_app.invites.verify_token(created.invitation.token)

        assert fake_supabase.queries == [("rpc", "verify_invitation"), ("rpc", "verify_invitation")]
        assert fake_supabase.rows("invitations")[0]["used"] is False
