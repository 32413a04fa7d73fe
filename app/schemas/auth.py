from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class TrainerRegister(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class TrainerLogin(BaseModel):
    email: EmailStr
    password: str


class ClientLogin(BaseModel):
    username: str
    code: str


class ClientRegister(BaseModel):
    username: str = Field(min_length=1)
    code: str = Field(min_length=4)
    email_or_nickname: Optional[str] = None
    trainer_code: int = Field(ge=0)


class AdminLogin(BaseModel):
    access_code: str


class TrainerIdentity(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)


class AuthResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str
    role: str
    username: str
    pt_code: Optional[int] = None


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class RoleResponse(BaseModel):
    role: str
    username: str
