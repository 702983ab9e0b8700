# crisma/services/dashboard.py
from __future__ import annotations

from typing import Any, Callable, List, Optional

from crisma.api_client import ApiClient
from crisma.schemas import DashboardStats
from crisma.services.list_view import PageController


class DashboardController(PageController):
    def __init__(self, api: ApiClient) -> None:
        super().__init__(api)
        self.stats: Optional[DashboardStats] = None

    def _fetchers(self) -> List[Callable[[], Any]]:
        return [lambda: self.api.get("/api/dashboard/stats", DashboardStats)]

    def _apply_loaded(self, results: List[Any]) -> None:
        self.stats = results[0]
