from .auth import LoginPayload, User
from .common import GroupSummary
from .catechists import Catechist, CatechistCreate, CatechistDetails
from .confirmands import (
    Confirmand,
    ConfirmandCreate,
    ConfirmandDetails,
    ConfirmandUpdate,
    MaritalStatus,
)
from .dashboard import DashboardStats
from .groups import (
    AddParticipantToGroup,
    ConfirmationGroup,
    ConfirmationGroupCreate,
    ConfirmationGroupDetails,
    DayOfTheWeek,
)
from .imports import ImportResult
from .sacraments import Sacrament, UpdateParticipantSacrament

__all__ = [
    "AddParticipantToGroup",
    "Catechist",
    "CatechistCreate",
    "CatechistDetails",
    "Confirmand",
    "ConfirmandCreate",
    "ConfirmandDetails",
    "ConfirmandUpdate",
    "ConfirmationGroup",
    "ConfirmationGroupCreate",
    "ConfirmationGroupDetails",
    "DashboardStats",
    "DayOfTheWeek",
    "GroupSummary",
    "ImportResult",
    "LoginPayload",
    "MaritalStatus",
    "Sacrament",
    "UpdateParticipantSacrament",
    "User",
]
