# crisma/schemas/auth.py
from __future__ import annotations

from pydantic import BaseModel, Field


class LoginPayload(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class User(BaseModel):
    id: int
    username: str
