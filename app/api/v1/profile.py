from fastapi import APIRouter, Depends

from app.core.dependencies import get_client_repository, get_current_session, get_trainer_repository
from app.core.errors import NotFound
from app.core.rbac import require_client, require_trainer
from app.core.session import SessionContext
from app.repositories.client_repository import ClientRepository
from app.repositories.trainer_repository import TrainerRepository
from app.schemas.profile import ClientCodeUpdate, ProfileUpdate, UserProfile
from app.services.auth_service import auth_service

router = APIRouter(tags=["profile"])


async def _profile_for(
    session: SessionContext, trainers: TrainerRepository, clients: ClientRepository
) -> UserProfile:
    if session.is_trainer:
        trainer = await trainers.get_by_id(session.subject_id)
        if trainer is None:
            raise NotFound("Trainer not found")
        return UserProfile(
            username=trainer.email,
            role=session.auth_type.value,
            pt_code=trainer.pt_code,
            first_name=trainer.first_name,
            last_name=trainer.last_name,
        )
    if session.is_client:
        client = await clients.get_by_id(session.subject_id)
        if client is None:
            raise NotFound("Client not found")
        return UserProfile(
            username=client.username,
            role=session.auth_type.value,
            email_or_nickname=client.email_or_nickname,
        )
    return UserProfile(username=session.username, role=session.auth_type.value)


@router.get("", response_model=UserProfile)
async def get_caller_profile(
    session: SessionContext = Depends(get_current_session),
    trainers: TrainerRepository = Depends(get_trainer_repository),
    clients: ClientRepository = Depends(get_client_repository),
):
    return await _profile_for(session, trainers, clients)


@router.put("", response_model=UserProfile)
async def save_caller_profile(
    data: ProfileUpdate,
    session: SessionContext = Depends(require_client),
    trainers: TrainerRepository = Depends(get_trainer_repository),
    clients: ClientRepository = Depends(get_client_repository),
):
    client = await clients.get_by_id(session.subject_id)
    if client is None:
        raise NotFound("Client not found")
    await clients.update_email(client, (data.email_or_nickname or "").strip() or None)
    return await _profile_for(session, trainers, clients)


@router.put("/code")
async def change_client_code(
    data: ClientCodeUpdate,
    session: SessionContext = Depends(require_client),
    clients: ClientRepository = Depends(get_client_repository),
):
    """A client replaces their own access code."""
    client = await clients.get_by_id(session.subject_id)
    if client is None:
        raise NotFound("Client not found")
    await auth_service.change_client_code(clients, client, data.current_code, data.new_code)
    return {"message": "Access code updated"}


@router.get("/pt-code")
async def get_trainer_pt_code(
    session: SessionContext = Depends(require_trainer),
    trainers: TrainerRepository = Depends(get_trainer_repository),
):
    trainer = await trainers.get_by_id(session.subject_id)
    if trainer is None:
        raise NotFound("No PT code found, authenticate first")
    return {"pt_code": trainer.pt_code}
