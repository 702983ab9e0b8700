# crisma/schemas/common.py
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel


class GroupSummary(BaseModel):
    """Short group form used in participant and catechist histories."""
    id: int
    module: int
    start_date: date
    catechist_name: Optional[str] = None
