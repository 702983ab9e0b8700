# crisma/schemas/catechists.py
from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import GroupSummary


class Catechist(BaseModel):
    id: int
    full_name: str
    currently_active: bool = True
    # Derived by the backend from the catechist's most recent group; read-only here
    latest_group_id: Optional[int] = None
    latest_group_module: Optional[int] = None
    latest_group_start_date: Optional[date] = None


class CatechistCreate(BaseModel):
    full_name: str = Field(..., min_length=1)
    currently_active: bool = True


class CatechistDetails(Catechist):
    group_history: List[GroupSummary] = Field(default_factory=list)
