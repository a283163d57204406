"""Pydantic request/response schemas for wallet sign-in.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, field_validator

from src.em_ledger.domain.derivation import is_valid_address


class ChallengeRequest(BaseModel):
    address: str

    @field_validator("address")
    @classmethod
    def base58_address(cls, v: str) -> str:
        if not is_valid_address(v):
            raise ValueError("not a base58 wallet address")
        return v


class ChallengeResponse(BaseModel):
    address: str
    message: str
    expires_in: int


class LoginRequest(BaseModel):
    address: str
    signature: str  # base58 ed25519 signature over the challenge message


class RefreshRequest(BaseModel):
    refresh_token: str


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = 1800
    address: str


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int = 1800
