import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt, JWTError

from app.core.config import settings
from app.core.errors import AlreadyExists, AppError, ErrorKind, NotFound, WrongCode
from app.core.session import AuthType, SessionContext
from app.models.client import Client
from app.models.trainer import Trainer
from app.repositories.client_repository import ClientRepository
from app.repositories.trainer_repository import TrainerRepository
from app.schemas.auth import AuthResponse, ClientRegister, TrainerRegister

logger = logging.getLogger(__name__)

PT_CODE_MIN = 100000
PT_CODE_MAX = 999999
PT_CODE_ATTEMPTS = 20


class AuthService:
    def __init__(self):
        self.SECRET_KEY = settings.SECRET_KEY
        self.REFRESH_SECRET_KEY = settings.REFRESH_SECRET_KEY
        self.ALGORITHM = settings.ALGORITHM
        self.ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.REFRESH_TOKEN_EXPIRE_DAYS = settings.REFRESH_TOKEN_EXPIRE_DAYS

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(
                plain_password.encode('utf-8'),
                hashed_password.encode('utf-8')
            )
        except ValueError:
            return False

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self.SECRET_KEY, algorithm=self.ALGORITHM)

    def create_refresh_token(self, data: dict) -> str:
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self.REFRESH_SECRET_KEY, algorithm=self.ALGORITHM)

    def decode_access_token(self, token: str) -> Optional[SessionContext]:
        try:
            payload = jwt.decode(token, self.SECRET_KEY, algorithms=[self.ALGORITHM])
            return SessionContext.from_claims(payload)
        except (JWTError, KeyError, ValueError):
            return None

    def decode_refresh_token(self, token: str) -> Optional[SessionContext]:
        try:
            payload = jwt.decode(token, self.REFRESH_SECRET_KEY, algorithms=[self.ALGORITHM])
            return SessionContext.from_claims(payload)
        except (JWTError, KeyError, ValueError):
            return None

    def issue_tokens(self, session: SessionContext, pt_code: Optional[int] = None, with_refresh: bool = True) -> AuthResponse:
        claims = session.to_claims()
        return AuthResponse(
            access_token=self.create_access_token(claims),
            refresh_token=self.create_refresh_token(claims) if with_refresh else None,
            token_type="bearer",
            role=session.auth_type.value,
            username=session.username,
            pt_code=pt_code,
        )

    @staticmethod
    def trainer_session(trainer: Trainer) -> SessionContext:
        return SessionContext(
            auth_type=AuthType.trainer,
            username=trainer.email,
            subject_id=trainer.id,
            trainer_id=trainer.id,
        )

    @staticmethod
    def client_session(client: Client) -> SessionContext:
        return SessionContext(
            auth_type=AuthType.client,
            username=client.username,
            subject_id=client.id,
            trainer_id=client.trainer_id,
        )

    @staticmethod
    def admin_session() -> SessionContext:
        return SessionContext(auth_type=AuthType.admin, username="admin")

    # ------------------------------------------------------------------
    # Trainers
    # ------------------------------------------------------------------

    async def issue_pt_code(self, repo: TrainerRepository) -> int:
        for _ in range(PT_CODE_ATTEMPTS):
            code = secrets.randbelow(PT_CODE_MAX - PT_CODE_MIN + 1) + PT_CODE_MIN
            if await repo.get_by_pt_code(code) is None:
                return code
        raise AppError("Could not issue a PT code, please retry", kind=ErrorKind.unknown)

    async def register_trainer(self, repo: TrainerRepository, data: TrainerRegister) -> Trainer:
        if await repo.get_by_email(data.email):
            raise AlreadyExists("A trainer with this email already exists")

        trainer = Trainer(
            email=data.email,
            password=self.hash_password(data.password),
            pt_code=await self.issue_pt_code(repo),
            created_at=datetime.utcnow(),
        )
        trainer = await repo.create(trainer)
        logger.info("Trainer %s registered with PT code %s", trainer.email, trainer.pt_code)
        return trainer

    async def authenticate_trainer(self, repo: TrainerRepository, email: str, password: str) -> Trainer:
        trainer = await repo.get_by_email(email)
        if not trainer or not self.verify_password(password, trainer.password):
            raise WrongCode("Wrong email or password")
        return trainer

    async def register_trainer_identity(
        self, repo: TrainerRepository, trainer_id: int, first_name: str, last_name: str
    ) -> Trainer:
        trainer = await repo.get_by_id(trainer_id)
        if trainer is None:
            raise NotFound("No PT code found, authenticate first")
        if trainer.has_identity:
            raise AppError("Trainer identity already exists", kind=ErrorKind.identity_exists)
        return await repo.set_identity(trainer, first_name.strip(), last_name.strip())

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    async def register_client(
        self, clients: ClientRepository, trainers: TrainerRepository, data: ClientRegister
    ) -> Client:
        trainer = await trainers.get_by_pt_code(data.trainer_code)
        if trainer is None:
            raise NotFound("No trainer with this PT code")
        if await clients.get_by_username(data.username):
            raise AlreadyExists("This username already exists")

        client = Client(
            username=data.username.strip(),
            code=self.hash_password(data.code),
            email_or_nickname=(data.email_or_nickname or "").strip() or None,
            trainer_id=trainer.id,
            created_at=datetime.utcnow(),
        )
        client = await clients.create(client)
        logger.info("Client %s registered with trainer %s", client.username, trainer.id)
        return client

    async def authenticate_client(self, repo: ClientRepository, username: str, code: str) -> Client:
        client = await repo.get_by_username(username)
        if not client or not self.verify_password(code, client.code):
            raise WrongCode("Wrong username or code")
        return client

    async def change_client_code(self, repo: ClientRepository, client: Client, current_code: str, new_code: str) -> None:
        if not self.verify_password(current_code, client.code):
            raise WrongCode("Current code is not correct")
        await repo.update_code(client, self.hash_password(new_code))

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def authenticate_admin(self, access_code: str) -> SessionContext:
        if not hmac.compare_digest(access_code.encode("utf-8"), settings.ADMIN_ACCESS_CODE.encode("utf-8")):
            raise WrongCode("Wrong admin access code")
        return self.admin_session()


auth_service = AuthService()
