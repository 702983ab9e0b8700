# crisma/utils.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Generic, List, Optional, Protocol, Sequence, TypeVar, Union


def group_label(start_date: Union[date, str]) -> str:
    """Semester label for a group: January-June is the 1st semester."""
    if isinstance(start_date, str):
        start_date = date.fromisoformat(start_date[:10])
    semester = "1st" if start_date.month <= 6 else "2nd"
    return f"{start_date.year} {semester} Semester"


def format_date(value: Union[date, datetime, str, None]) -> str:
    """``March 5, 2025`` style; ``N/A`` when there is no date."""
    if not value:
        return "N/A"
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.strftime('%B')} {value.day}, {value.year}"


# ─────────────────────────────────────────────────────────────────────────────
# Searchable picker (anything with an id and a name)
# ─────────────────────────────────────────────────────────────────────────────

class Named(Protocol):
    @property
    def id(self) -> Union[int, str]: ...

    @property
    def name(self) -> str: ...


N = TypeVar("N", bound=Named)


@dataclass(frozen=True)
class PickerItem:
    id: Union[int, str]
    name: str


class SearchablePicker(Generic[N]):
    def __init__(self, items: Sequence[N], selected: Optional[N] = None) -> None:
        self.items = list(items)
        self.query = ""
        self.selected = selected

    @property
    def options(self) -> List[N]:
        if not self.query:
            return list(self.items)
        q = self.query.lower()
        return [item for item in self.items if q in item.name.lower()]

    def select(self, item_id: Union[int, str, None]) -> Optional[N]:
        # compared by id so fresh copies of the same record still match
        self.selected = next((i for i in self.items if i.id == item_id), None)
        return self.selected
