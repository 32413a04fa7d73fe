from typing import List

from fastapi import APIRouter, Depends

from app.core.dependencies import get_client_repository, get_current_session, get_query_cache
from app.core.rbac import load_client_for, require_trainer, require_trainer_or_admin
from app.core.session import SessionContext
from app.repositories.client_repository import ClientRepository
from app.schemas.client import ClientInfo, ClientProfile, EmailUpdate, HeightUpdate
from app.services.query_cache import PROGRESS_VIEW, QueryCache

router = APIRouter(tags=["clients"])


@router.get("", response_model=List[ClientProfile])
async def get_clients_for_trainer(
    session: SessionContext = Depends(require_trainer),
    clients: ClientRepository = Depends(get_client_repository),
):
    """The calling trainer's roster."""
    roster = await clients.list_for_trainer(session.trainer_id)
    return [ClientProfile.model_validate(client) for client in roster]


@router.get("/{username}", response_model=ClientProfile)
async def get_client_profile(
    username: str,
    session: SessionContext = Depends(get_current_session),
    clients: ClientRepository = Depends(get_client_repository),
):
    client = await load_client_for(session, username, clients)
    return ClientProfile.model_validate(client)


@router.get("/{username}/info", response_model=ClientInfo)
async def get_client_info(
    username: str,
    session: SessionContext = Depends(get_current_session),
    clients: ClientRepository = Depends(get_client_repository),
):
    client = await load_client_for(session, username, clients)
    return ClientInfo(
        username=client.username,
        trainer_code=client.trainer.pt_code,
        email_or_nickname=client.email_or_nickname,
        height=client.height,
    )


@router.put("/{username}/height", response_model=ClientInfo)
async def set_client_height(
    username: str,
    data: HeightUpdate,
    session: SessionContext = Depends(get_current_session),
    clients: ClientRepository = Depends(get_client_repository),
    cache: QueryCache = Depends(get_query_cache),
):
    client = await load_client_for(session, username, clients)
    await clients.set_height(client, data.height)
    await cache.invalidate(client.username, PROGRESS_VIEW)
    return ClientInfo(
        username=client.username,
        trainer_code=client.trainer.pt_code,
        email_or_nickname=client.email_or_nickname,
        height=client.height,
    )


@router.put("/{username}/email", response_model=ClientProfile)
async def update_client_email(
    username: str,
    data: EmailUpdate,
    session: SessionContext = Depends(require_trainer_or_admin),
    clients: ClientRepository = Depends(get_client_repository),
):
    client = await load_client_for(session, username, clients)
    await clients.update_email(client, data.new_email.strip())
    return ClientProfile.model_validate(client)
