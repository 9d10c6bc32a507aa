"""
FastAPI application example with TaskHero integration.

This example demonstrates how to use TaskHero with FastAPI:
- Bearer-token authentication
- Administrator-only invitation routes
- Public token verification and registration
- Per-user task routes

Run with:
    uvicorn examples.fastapi_app:app --reload
"""

from typing import List, Optional
from uuid import UUID

from fastapi import Depends, FastAPI
from pydantic import BaseModel

from taskhero import Task, TaskStatus, UserRole, UserSession
from taskhero.integrations.fastapi import TaskHeroFastAPI

# =================================================================
# FastAPI App Setup
# =================================================================

integration = TaskHeroFastAPI()

app = FastAPI(
    title="TaskHero Example API",
    description="Invitation-only task management",
    version="1.0.0",
    lifespan=integration.lifespan,
)

integration.install_error_handlers(app)


# =================================================================
# Request/Response Models
# =================================================================


class InvitationCreate(BaseModel):
    email: str
    role: UserRole = UserRole.USER


class InvitationResponse(BaseModel):
    id: UUID
    email: str
    role: UserRole
    link: str
    email_sent: Optional[bool] = None


class VerificationResponse(BaseModel):
    ok: bool
    message: str
    email: Optional[str] = None
    role: Optional[UserRole] = None


class RegistrationBody(BaseModel):
    token: str
    password: str


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None


# =================================================================
# Public Routes (No Auth Required)
# =================================================================


@app.get("/invitations/verify", response_model=VerificationResponse)
async def verify_invitation(token: str):
    verification = await integration.taskhero.invites.verify_token(token)
    if verification.ok:
        return VerificationResponse(
            ok=True,
            message=verification.message,
            email=verification.email,
            role=verification.role,
        )
    return VerificationResponse(ok=False, message=verification.message)


@app.post("/register")
async def register(body: RegistrationBody):
    result = await integration.taskhero.registration.register(body.token, body.password)
    return {"user_id": result.user_id, "email": result.email, "role": result.role}


# =================================================================
# Administrator Routes
# =================================================================


@app.post("/invitations", response_model=InvitationResponse)
async def create_invitation(
    body: InvitationCreate,
    session: UserSession = Depends(integration.require_admin()),
):
    created = await integration.taskhero.invites.invite(session, body.email, body.role)
    return InvitationResponse(
        id=created.invitation.id,
        email=created.invitation.email,
        role=created.invitation.role,
        link=created.link,
        email_sent=created.email_sent,
    )


@app.delete("/invitations/{invitation_id}", status_code=204)
async def delete_invitation(
    invitation_id: UUID,
    session: UserSession = Depends(integration.require_admin()),
):
    await integration.taskhero.invites.delete(session, invitation_id)


# =================================================================
# Authenticated Routes
# =================================================================


@app.get("/tasks", response_model=List[Task])
async def list_tasks(
    status: Optional[TaskStatus] = None,
    search: Optional[str] = None,
    session: UserSession = Depends(integration.require_auth()),
):
    return await integration.taskhero.tasks.list(session, status=status, search=search)


@app.post("/tasks", response_model=Task)
async def create_task(
    body: TaskCreate,
    session: UserSession = Depends(integration.require_auth()),
):
    return await integration.taskhero.tasks.create(
        session, title=body.title, description=body.description
    )


@app.put("/tasks/{task_id}/status/{status}", response_model=Task)
async def set_task_status(
    task_id: UUID,
    status: TaskStatus,
    session: UserSession = Depends(integration.require_auth()),
):
    return await integration.taskhero.tasks.set_status(session, task_id, status)
