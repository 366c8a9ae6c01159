"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    username: str = Field(default="", max_length=50)
    # bcrypt only looks at the first 72 bytes
    password: str = Field(default="", max_length=72)


class LoginRequest(SignupRequest):
    pass


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    account_id: str
    username: str


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    message: str


class AssetCreatedResponse(BaseModel):
    id: int
    storage_key: str
    url: str
    message: str


class AssetResponse(BaseModel):
    id: int
    owner_id: str
    storage_key: str
    url: str
    overlay_props: Optional[dict[str, Any]] = None
    text_overlay: Optional[dict[str, Any]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
