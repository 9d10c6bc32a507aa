"""
Invitation email delivery.

Emails are sent by a Supabase edge function (``send-invitation`` by
default) which renders the message and hands it to the mail provider.
This module only invokes that function.

Wraps: supabase_functions._async.functions_client.AsyncFunctionsClient.invoke
Source: venv/lib/python3.14/site-packages/supabase_functions/_async/functions_client.py
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx
from supabase_functions.errors import FunctionsError

from ..auth.models import UserRole
from ..errors import EmailDeliveryError
from .models import EmailDelivery

if TYPE_CHECKING:
    from ..utils.supabase import TaskHeroSupabaseClient

logger = logging.getLogger(__name__)


class InvitationMailer:
    """
    Sends invitation emails through the configured edge function.

    The function receives ``{"email", "invitationLink", "role"}`` and
    answers with the mail provider's JSON response.
    """

    def __init__(self, client: "TaskHeroSupabaseClient", function_name: str) -> None:
        self.client = client
        self.function_name = function_name

    async def send(self, to_email: str, link: str, role: UserRole) -> EmailDelivery:
        """
        Send an invitation email.

        Args:
            to_email: Invitee address
            link: Registration link carrying the token
            role: Role the invitation grants (shown in the email)

        Returns:
            EmailDelivery with the provider's message id when reported

        Raises:
            EmailDeliveryError: If the function or the transport failed
        """
        body = {
            "email": to_email,
            "invitationLink": link,
            "role": UserRole(role).value,
        }

        try:
            response = await self.client.functions.invoke(
                self.function_name,
                invoke_options={"body": body, "responseType": "json"},
            )
        except (FunctionsError, httpx.HTTPError) as exc:
            raise EmailDeliveryError(
                f"Failed to send invitation email to {to_email}: {exc}"
            ) from exc

        payload: Dict[str, Any] = response if isinstance(response, dict) else {}
        if payload.get("error"):
            raise EmailDeliveryError(
                f"Failed to send invitation email to {to_email}: {payload['error']}"
            )

        logger.info("Invitation email sent to %s", to_email)
        return EmailDelivery(
            recipient=to_email,
            message_id=_message_id(payload),
            response=payload,
        )


def _message_id(payload: Dict[str, Any]) -> Optional[str]:
    # The provider answers either {"id": ...} or {"data": {"id": ...}, "error": null}
    if payload.get("id"):
        return str(payload["id"])
    data = payload.get("data")
    if isinstance(data, dict) and data.get("id"):
        return str(data["id"])
    return None
