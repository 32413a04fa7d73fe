import enum
from dataclasses import dataclass
from typing import Optional


class AuthType(str, enum.Enum):
    trainer = "trainer"
    client = "client"
    admin = "admin"


@dataclass(frozen=True)
class SessionContext:
    """Who is calling: set up on login, dropped on logout.

    ``subject_id`` is the trainer id for trainers, the client id for clients
    and 0 for the admin. ``trainer_id`` is the owning trainer for clients and
    the trainer itself for trainers.
    """

    auth_type: AuthType
    username: str
    subject_id: int = 0
    trainer_id: Optional[int] = None

    @property
    def is_trainer(self) -> bool:
        return self.auth_type == AuthType.trainer

    @property
    def is_client(self) -> bool:
        return self.auth_type == AuthType.client

    @property
    def is_admin(self) -> bool:
        return self.auth_type == AuthType.admin

    def to_claims(self) -> dict:
        claims = {
            "sub": str(self.subject_id),
            "typ": self.auth_type.value,
            "usr": self.username,
        }
        if self.trainer_id is not None:
            claims["trn"] = self.trainer_id
        return claims

    @classmethod
    def from_claims(cls, claims: dict) -> "SessionContext":
        trainer_id = claims.get("trn")
        return cls(
            auth_type=AuthType(claims["typ"]),
            username=claims["usr"],
            subject_id=int(claims["sub"]),
            trainer_id=int(trainer_id) if trainer_id is not None else None,
        )
