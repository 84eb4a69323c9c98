# wecare/schemas/auth/auth.py
from typing import Optional
from pydantic import Field

from ..common.common import CamelModel
from ..users.profile import AccountResponse


class SignupRequest(CamelModel):
    name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)
    role: str = "patient"


class LoginRequest(CamelModel):
    email: str
    password: str


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    account: AccountResponse
    nurse_id: Optional[str] = None
