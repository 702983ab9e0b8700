# crisma/schemas/confirmands.py
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import GroupSummary
from .sacraments import Sacrament


class MaritalStatus(str, Enum):
    SINGLE = "Single"
    MARRIED_CHURCH = "Married - Church"
    MARRIED_CIVIL = "Married - Civil"
    UNION = "Union"
    DIVORCED = "Divorced"
    WIDOWED = "Widowed"


class Confirmand(BaseModel):
    id: int
    full_name: str
    birth_date: Optional[date] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    marital_status: Optional[str] = None
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    baptism_church: Optional[str] = None
    communion_church: Optional[str] = None
    creation_date: Optional[datetime] = None

    # Most recent group membership, joined in by the backend
    current_group_id: Optional[int] = None
    current_group_module: Optional[int] = None
    current_group_start_date: Optional[date] = None


class ConfirmandCreate(BaseModel):
    full_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone_number: str = Field(..., min_length=1)
    birth_date: date
    address: str = Field(..., min_length=1)
    marital_status: MaritalStatus = MaritalStatus.SINGLE
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    baptism_church: Optional[str] = None
    communion_church: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


# The backend takes the full record on PUT as well
ConfirmandUpdate = ConfirmandCreate


class ConfirmandDetails(Confirmand):
    sacraments: List[Sacrament] = Field(default_factory=list)
    group_history: List[GroupSummary] = Field(default_factory=list)
