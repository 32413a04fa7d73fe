from pydantic import BaseModel, Field
from typing import Optional


class UserProfile(BaseModel):
    username: str
    role: str
    email_or_nickname: Optional[str] = None
    pt_code: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ProfileUpdate(BaseModel):
    email_or_nickname: Optional[str] = None


class ClientCodeUpdate(BaseModel):
    current_code: str
    new_code: str = Field(min_length=4)
