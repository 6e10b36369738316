from pydantic import BaseModel, Field
from typing import Optional

from models.user import UserRole

class UserRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8)

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    role: Optional[UserRole] = None
    active: Optional[bool] = None
    partner_id: Optional[str] = None

class TokenData(BaseModel):
    refresh_token: str
