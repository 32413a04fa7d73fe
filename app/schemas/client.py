from pydantic import BaseModel, Field
from typing import Optional


class ClientProfile(BaseModel):
    username: str
    email_or_nickname: Optional[str] = None

    class Config:
        from_attributes = True


class ClientInfo(BaseModel):
    username: str
    trainer_code: int
    email_or_nickname: Optional[str] = None
    height: Optional[int] = None


class HeightUpdate(BaseModel):
    height: int = Field(gt=0, le=300)


class EmailUpdate(BaseModel):
    new_email: str = Field(min_length=1)
