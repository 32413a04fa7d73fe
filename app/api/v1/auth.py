from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.dependencies import get_client_repository, get_current_session, get_trainer_repository
from app.core.rbac import require_trainer
from app.core.session import SessionContext
from app.repositories.client_repository import ClientRepository
from app.repositories.trainer_repository import TrainerRepository
from app.schemas.admin import TrainerDetails
from app.schemas.auth import (
    AdminLogin,
    AuthResponse,
    ClientLogin,
    ClientRegister,
    RefreshTokenRequest,
    RoleResponse,
    TrainerIdentity,
    TrainerLogin,
    TrainerRegister,
)
from app.services.auth_service import auth_service

router = APIRouter(tags=["auth"])


def _refresh_expiry() -> datetime:
    return datetime.utcnow() + timedelta(days=auth_service.REFRESH_TOKEN_EXPIRE_DAYS)


@router.post("/trainer/register", response_model=AuthResponse)
async def register_trainer(
    data: TrainerRegister,
    trainers: TrainerRepository = Depends(get_trainer_repository),
):
    """Create a trainer account; a PT code is issued on the spot."""
    trainer = await auth_service.register_trainer(trainers, data)
    tokens = auth_service.issue_tokens(auth_service.trainer_session(trainer), pt_code=trainer.pt_code)
    await trainers.save_refresh_token(trainer, tokens.refresh_token, _refresh_expiry())
    return tokens


@router.post("/trainer/login", response_model=AuthResponse)
async def login_trainer(
    data: TrainerLogin,
    trainers: TrainerRepository = Depends(get_trainer_repository),
):
    trainer = await auth_service.authenticate_trainer(trainers, data.email, data.password)
    tokens = auth_service.issue_tokens(auth_service.trainer_session(trainer), pt_code=trainer.pt_code)
    await trainers.save_refresh_token(trainer, tokens.refresh_token, _refresh_expiry())
    return tokens


@router.post("/trainer/identity", response_model=TrainerDetails)
async def register_trainer_identity(
    data: TrainerIdentity,
    session: SessionContext = Depends(require_trainer),
    trainers: TrainerRepository = Depends(get_trainer_repository),
):
    """First and last name can be set once."""
    trainer = await auth_service.register_trainer_identity(
        trainers, session.subject_id, data.first_name, data.last_name
    )
    return TrainerDetails.model_validate(trainer)


@router.post("/client/register", response_model=AuthResponse)
async def register_client(
    data: ClientRegister,
    clients: ClientRepository = Depends(get_client_repository),
    trainers: TrainerRepository = Depends(get_trainer_repository),
):
    """Self-registration against a trainer's PT code."""
    client = await auth_service.register_client(clients, trainers, data)
    tokens = auth_service.issue_tokens(auth_service.client_session(client))
    await clients.save_refresh_token(client, tokens.refresh_token, _refresh_expiry())
    return tokens


@router.post("/client/login", response_model=AuthResponse)
async def login_client(
    data: ClientLogin,
    clients: ClientRepository = Depends(get_client_repository),
):
    client = await auth_service.authenticate_client(clients, data.username, data.code)
    tokens = auth_service.issue_tokens(auth_service.client_session(client))
    await clients.save_refresh_token(client, tokens.refresh_token, _refresh_expiry())
    return tokens


@router.post("/admin/login", response_model=AuthResponse)
async def login_admin(data: AdminLogin):
    session = auth_service.authenticate_admin(data.access_code)
    return auth_service.issue_tokens(session, with_refresh=False)


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(
    request: RefreshTokenRequest,
    trainers: TrainerRepository = Depends(get_trainer_repository),
    clients: ClientRepository = Depends(get_client_repository),
):
    """New access token for a still valid refresh token."""
    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired refresh token",
    )
    session = auth_service.decode_refresh_token(request.refresh_token)
    if session is None:
        raise invalid

    if session.is_trainer:
        owner = await trainers.get_by_id(session.subject_id)
    elif session.is_client:
        owner = await clients.get_by_id(session.subject_id)
    else:
        raise invalid

    if (
        owner is None
        or owner.refresh_token != request.refresh_token
        or owner.refresh_token_expires is None
        or owner.refresh_token_expires < datetime.utcnow()
    ):
        raise invalid

    tokens = auth_service.issue_tokens(
        session,
        pt_code=getattr(owner, "pt_code", None) if session.is_trainer else None,
        with_refresh=False,
    )
    tokens.refresh_token = request.refresh_token
    return tokens


@router.post("/logout")
async def logout(
    session: SessionContext = Depends(get_current_session),
    trainers: TrainerRepository = Depends(get_trainer_repository),
    clients: ClientRepository = Depends(get_client_repository),
):
    """Drop the stored refresh token; the access token simply runs out."""
    if session.is_trainer:
        owner = await trainers.get_by_id(session.subject_id)
        if owner is not None:
            await trainers.save_refresh_token(owner, None, None)
    elif session.is_client:
        owner = await clients.get_by_id(session.subject_id)
        if owner is not None:
            await clients.save_refresh_token(owner, None, None)
    return {"message": "Logged out"}


@router.get("/role", response_model=RoleResponse)
async def get_caller_role(session: SessionContext = Depends(get_current_session)):
    return RoleResponse(role=session.auth_type.value, username=session.username)
