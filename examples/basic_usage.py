"""
Basic TaskHero usage example.

This example walks through the invitation flow:
- An administrator invites someone
- The invitee's token is verified and an account registered
- The new user manages their tasks

Run with:
    TASKHERO_ADMIN_EMAIL=... TASKHERO_ADMIN_PASSWORD=... python examples/basic_usage.py
"""

import asyncio
import os

from taskhero import TaskHero, TaskStatus, UserRole


async def main():
    # Create TaskHero clients (loads config from .env). One client per
    # signed-in principal, like one browser session each.
    admin_app = await TaskHero.create()
    invitee_app = await TaskHero.create()

    try:
        # =================================================================
        # 1. Administrator invites someone
        # =================================================================
        print("Signing in as administrator...")

        admin = await admin_app.sessions.sign_in_with_password(
            email=os.environ["TASKHERO_ADMIN_EMAIL"],
            password=os.environ["TASKHERO_ADMIN_PASSWORD"],
        )

        created = await admin_app.invites.invite(admin, "newcomer@example.com", UserRole.USER)
        print(f"  Invited {created.invitation.email}, email sent: {created.email_sent}")
        print(f"  Link: {created.link}")

        # =================================================================
        # 2. Invitee opens the link and registers
        # =================================================================
        token = created.invitation.token

        verification = await invitee_app.invites.verify_token(token)
        print(f"\nVerification: {verification.message}")
        if not verification.ok:
            return

        result = await invitee_app.registration.register(token, "newcomer-password-123")
        print(f"  Registered {result.email} as {result.role.value}")

        # A second attempt with the same link is refused
        again = await invitee_app.invites.verify_token(token)
        print(f"  Reusing the link: {again.message}")

        # =================================================================
        # 3. The new user works on tasks
        # =================================================================
        if result.session is None:
            print("\nConfirm the email address, then sign in to manage tasks.")
            return

        user = result.session
        task = await invitee_app.tasks.create(user, title="Read the onboarding guide")
        await invitee_app.tasks.set_status(user, task.id, TaskStatus.COMPLETED)

        for item in await invitee_app.tasks.list(user):
            print(f"  [{item.status.value}] {item.title}")

        # =================================================================
        # 4. Administrator housekeeping
        # =================================================================
        for invitation in await admin_app.invites.list(admin):
            print(f"  {invitation.email}: {invitation.status().value}")

        purged = await admin_app.invites.purge_expired(admin)
        print(f"\nPurged {purged} expired invitation(s)")

    finally:
        await invitee_app.close()
        await admin_app.close()


if __name__ == "__main__":
    asyncio.run(main())
