# crisma/services/list_view.py
"""
Page controllers for the list screens (participants, catechists, groups).

A controller owns the canonical collection for its page. Reads go through
``projection`` (filter by query, then sort by name); writes go through a
command that first waits for the backend and only then touches the
collection, so a failed call never leaves local state half-applied.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from pydantic import BaseModel

from crisma.api_client import ApiClient, ApiError
from crisma.services.projection import project, sort_by_name

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)
R = TypeVar("R")

Confirm = Union[bool, Callable[[str], bool]]


class PageState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class CommandInFlight(RuntimeError):
    """A second command was issued while the first is still waiting on the backend."""


def fetch_all(calls: Sequence[Callable[[], Any]]) -> List[Any]:
    """Run independent fetches concurrently; results come back in call order.

    Raises the first failure to arrive. Nothing is cancelled; the remaining
    requests simply run out and are discarded.
    """
    if len(calls) == 1:
        return [calls[0]()]
    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        futures = [pool.submit(call) for call in calls]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        for fut in futures:
            if fut in done and fut.exception() is not None:
                raise fut.exception()  # type: ignore[misc]
        return [fut.result() for fut in futures]


def is_confirmed(confirm: Confirm, prompt: str) -> bool:
    if callable(confirm):
        return bool(confirm(prompt))
    return bool(confirm)


class PageController:
    """``loading -> ready | error`` bookkeeping shared by every page."""

    def __init__(self, api: ApiClient) -> None:
        self.api = api
        self.state = PageState.LOADING
        self.error: Optional[str] = None
        self._command_lock = threading.Lock()

    @property
    def submitting(self) -> bool:
        return self._command_lock.locked()

    def _fetchers(self) -> List[Callable[[], Any]]:
        raise NotImplementedError

    def _apply_loaded(self, results: List[Any]) -> None:
        raise NotImplementedError

    def load(self) -> PageState:
        self.state = PageState.LOADING
        self.error = None
        try:
            results = fetch_all(self._fetchers())
        except ApiError as exc:
            self.state = PageState.ERROR
            self.error = exc.message
            logger.warning("%s failed to load: %s", type(self).__name__, exc.message)
            return self.state
        self._apply_loaded(results)
        self.state = PageState.READY
        return self.state

    def _command(self, call: Callable[[], R], apply: Optional[Callable[[R], None]] = None) -> R:
        """Issue ``call``; on success hand its result to ``apply``.

        The error message is kept on the controller and the ``ApiError`` is
        re-raised for the caller.
        """
        if not self._command_lock.acquire(blocking=False):
            raise CommandInFlight("Another request is still in progress.")
        try:
            self.error = None
            try:
                result = call()
            except ApiError as exc:
                self.error = exc.message
                raise
            if apply is not None:
                apply(result)
            return result
        finally:
            self._command_lock.release()


class ListViewController(PageController, Generic[T]):
    path: str = ""
    model: type = BaseModel
    delete_prompt = "Are you sure you want to delete this record? This action cannot be undone."

    def __init__(self, api: ApiClient) -> None:
        super().__init__(api)
        self._items: List[T] = []
        self._query = ""
        self._version = 0
        self._memo: Optional[Tuple[Tuple[int, str], List[T]]] = None
        # held for every read-modify-write of the collection; commands and
        # import merges land here from different worker threads
        self._items_lock = threading.RLock()
        self._listeners: List[Callable[[List[T]], None]] = []

    # ---- naming --------------------------------------------------------------

    def name_of(self, item: T) -> str:
        return getattr(item, "full_name", "")

    # ---- canonical collection -------------------------------------------------

    @property
    def items(self) -> List[T]:
        return list(self._items)

    def subscribe(self, listener: Callable[[List[T]], None]) -> None:
        """Call ``listener`` with the new collection after every change."""
        self._listeners.append(listener)

    def _replace_items(self, items: Iterable[T]) -> None:
        with self._items_lock:
            self._items = sort_by_name(items, self.name_of)
            self._version += 1
            snapshot = list(self._items)
            for listener in self._listeners:
                listener(snapshot)

    def get(self, item_id: int) -> Optional[T]:
        return next((i for i in self._items if i.id == item_id), None)

    # ---- query + projection ---------------------------------------------------

    @property
    def query(self) -> str:
        return self._query

    @query.setter
    def query(self, value: Optional[str]) -> None:
        self._query = value or ""

    @property
    def projection(self) -> List[T]:
        with self._items_lock:
            key = (self._version, self._query)
            if self._memo is None or self._memo[0] != key:
                self._memo = (key, project(self._items, self._query, self.name_of))
            return list(self._memo[1])

    # ---- loading --------------------------------------------------------------

    def _fetchers(self) -> List[Callable[[], Any]]:
        return [lambda: self.api.get(self.path, List[self.model])]  # type: ignore[name-defined,valid-type]

    def _apply_loaded(self, results: List[Any]) -> None:
        self._replace_items(results[0])

    # ---- local transitions (only after a confirmed server result) -------------

    def added(self, entity: T) -> None:
        with self._items_lock:
            rest = [i for i in self._items if i.id != entity.id]
            self._replace_items([*rest, entity])

    def updated(self, entity: T) -> None:
        with self._items_lock:
            self._replace_items([entity if i.id == entity.id else i for i in self._items])

    def removed(self, item_id: int) -> None:
        with self._items_lock:
            self._replace_items([i for i in self._items if i.id != item_id])

    def merge(self, records: Iterable[T]) -> int:
        """Add records whose id is not already present; returns how many were new."""
        with self._items_lock:
            existing = {i.id for i in self._items}
            fresh: List[T] = []
            for rec in records:
                if rec.id in existing:
                    continue
                existing.add(rec.id)
                fresh.append(rec)
            if fresh:
                self._replace_items([*self._items, *fresh])
            return len(fresh)

    # ---- commands -------------------------------------------------------------

    def create(self, payload: Union[BaseModel, Dict[str, Any]]) -> T:
        return self._command(lambda: self.api.post(self.path, payload, self.model), self.added)

    def update(self, item_id: int, payload: Union[BaseModel, Dict[str, Any]]) -> T:
        return self._command(
            lambda: self.api.put(f"{self.path}/{item_id}", payload, self.model), self.updated
        )

    def delete(self, item_id: int, confirm: Confirm) -> bool:
        """Delete after an explicit yes; returns False when the operator declined."""
        if not is_confirmed(confirm, self.delete_prompt):
            return False
        self._command(lambda: self.api.delete(f"{self.path}/{item_id}"), lambda _: self.removed(item_id))
        return True
