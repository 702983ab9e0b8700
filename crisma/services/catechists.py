# crisma/services/catechists.py
from __future__ import annotations

from typing import Any, Callable, List, Optional

from crisma.api_client import ApiClient
from crisma.schemas import Catechist, CatechistDetails
from crisma.services.list_view import ListViewController, PageController


class CatechistsController(ListViewController[Catechist]):
    path = "/api/catechists"
    model = Catechist


class CatechistDetailController(PageController):
    def __init__(self, api: ApiClient, catechist_id: int) -> None:
        super().__init__(api)
        self.catechist_id = catechist_id
        self.details: Optional[CatechistDetails] = None

    def _fetchers(self) -> List[Callable[[], Any]]:
        return [lambda: self.api.get(f"/api/catechists/{self.catechist_id}/details", CatechistDetails)]

    def _apply_loaded(self, results: List[Any]) -> None:
        self.details = results[0]
