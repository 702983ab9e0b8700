# crisma/schemas/groups.py
from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import GroupSummary
from .confirmands import Confirmand

__all__ = [
    "AddParticipantToGroup",
    "ConfirmationGroup",
    "ConfirmationGroupCreate",
    "ConfirmationGroupDetails",
    "DayOfTheWeek",
    "GroupSummary",
]


class DayOfTheWeek(str, Enum):
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"


class ConfirmationGroup(BaseModel):
    id: int
    module: int
    catechist_id: Optional[int] = None
    catechist_name: Optional[str] = None
    day_of_the_week: str
    group_link: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None


class ConfirmationGroupCreate(BaseModel):
    module: int = Field(1, ge=1)
    catechist_id: Optional[int] = None
    day_of_the_week: DayOfTheWeek = DayOfTheWeek.SUNDAY
    start_date: date
    group_link: Optional[str] = None
    end_date: Optional[date] = None

    model_config = ConfigDict(use_enum_values=True)


class ConfirmationGroupDetails(BaseModel):
    id: int
    module: int
    catechist_name: Optional[str] = None
    day_of_the_week: str
    start_date: date
    members: List[Confirmand] = Field(default_factory=list)


class AddParticipantToGroup(BaseModel):
    confirmand_id: int
