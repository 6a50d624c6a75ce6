from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str
    password: str


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str = Field(
        ...,
        min_length=8,
        max_length=4096,
        description="New admin password (min length: 8 characters)",
    )


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AdminOut(BaseModel):
    id: int
    username: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True
