# bagtag/schemas/auth.py
from datetime import datetime

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=256)
    display_name: str = Field(default="", max_length=120)


class SignUpResponse(BaseModel):
    user_id: str
    email: str
    message: str


class VerifyEmailRequest(BaseModel):
    token: str = Field(min_length=1, max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=256)


class MeResponse(BaseModel):
    user_id: str
    email: str
    display_name: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime | None = None
    user: MeResponse
