from datetime import datetime
from pydantic import BaseModel


class LoginRequest(BaseModel):
    phone: str
    password: str


# What a client keeps about the signed-in user; no role, no secrets
class SessionUser(BaseModel):
    id: str
    phone: str


class LoginResponse(BaseModel):
    token: str
    expires_at: datetime
    user: SessionUser
