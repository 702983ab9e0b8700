# crisma/schemas/sacraments.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Sacrament(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(frozen=True)


class UpdateParticipantSacrament(BaseModel):
    sacrament_id: int
