from fastapi import Depends

from app.core.dependencies import get_current_session
from app.core.errors import AppError, ErrorKind, Forbidden, NotFound
from app.core.session import AuthType, SessionContext
from app.models.client import Client
from app.repositories.client_repository import ClientRepository


def require_role(*allowed: AuthType):
    """Dependency factory checking who is calling."""
    async def role_checker(session: SessionContext = Depends(get_current_session)) -> SessionContext:
        if session.auth_type not in allowed:
            if allowed == (AuthType.admin,):
                raise AppError("Unauthorized: Admin access required", kind=ErrorKind.admin_required)
            roles = ", ".join(role.value for role in allowed)
            raise Forbidden(f"Only {roles} can do this")
        return session
    return role_checker


require_admin = require_role(AuthType.admin)
require_trainer = require_role(AuthType.trainer)
require_client = require_role(AuthType.client)
require_trainer_or_admin = require_role(AuthType.trainer, AuthType.admin)


def can_access_client(session: SessionContext, client: Client) -> bool:
    if session.is_admin:
        return True
    if session.is_trainer:
        return client.trainer_id == session.trainer_id
    return client.id == session.subject_id


async def load_client_for(session: SessionContext, username: str, clients: ClientRepository) -> Client:
    """The named client, provided the caller may see them.

    Clients outside the caller's reach are reported as missing so that
    usernames of other trainers' clients do not leak.
    """
    client = await clients.get_by_username(username)
    if client is None or not can_access_client(session, client):
        raise NotFound(f"Client '{username}' not found")
    return client
