"""Requests and Response models of the snapshot service"""

from typing import Optional

from pydantic import BaseModel, field_validator


# --- REQUEST MODELS ---
class StoreStateRequest(BaseModel):
    name: str
    state: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be empty")
        return value


# --- RESPONSE MODELS ---
class StateResponse(BaseModel):
    state: Optional[str]


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
