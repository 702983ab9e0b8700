# crisma/schemas/dashboard.py
from __future__ import annotations

from pydantic import BaseModel


class DashboardStats(BaseModel):
    participant_count: int = 0
    catechist_count: int = 0
    active_group_count: int = 0
