from typing import Optional
from pydantic import BaseModel, Field, EmailStr

from coursehub.config import MIN_PASSWORD_LENGTH


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class PublicUser(BaseModel):
    id: str = Field(..., alias="_id")
    name: Optional[str] = None
    email: EmailStr
    is_admin: bool = False


class AuthResponse(BaseModel):
    message: Optional[str] = None
    token: str
    user: PublicUser
