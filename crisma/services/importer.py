# crisma/services/importer.py
"""
Bulk TSV import of participants.

The file goes to the backend untouched as a ``text/plain`` body; the backend
decides which rows to keep. The widget only tracks its own lifecycle and hands
the newly created records to whoever owns the participant list.
"""
from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from crisma.api_client import ApiClient, ApiError
from crisma.schemas import Confirmand, ImportResult

logger = logging.getLogger(__name__)

IMPORT_PATH = "/api/confirmands/import"
DEFAULT_CLOSE_DELAY = 2.0
NOT_UTF8_MESSAGE = "File is not valid UTF-8 text."


class ImportState(str, Enum):
    IDLE = "idle"
    FILE_SELECTED = "file-selected"
    IMPORTING = "importing"


def _default_scheduler(delay: float, callback: Callable[[], None]) -> None:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()


class ImportWidget:
    """idle -> file-selected -> importing -> idle (ok) | file-selected (failed)."""

    def __init__(
        self,
        api: ApiClient,
        on_success: Callable[[List[Confirmand]], object],
        on_close: Optional[Callable[[], None]] = None,
        close_delay: float = DEFAULT_CLOSE_DELAY,
        scheduler: Callable[[float, Callable[[], None]], None] = _default_scheduler,
    ) -> None:
        self.api = api
        self.on_success = on_success
        self.on_close = on_close
        self.close_delay = close_delay
        self.scheduler = scheduler

        self.state = ImportState.IDLE
        self.file_name: Optional[str] = None
        self.content: Optional[str] = None
        self.error: Optional[str] = None
        self.success_message: Optional[str] = None
        self.result: Optional[ImportResult] = None
        # bumped on every selection so a stale auto-close can tell it is stale
        self._selection = 0

    @property
    def can_submit(self) -> bool:
        return self.state == ImportState.FILE_SELECTED

    def select_text(self, content: str, file_name: str = "import.tsv") -> None:
        if self.state == ImportState.IMPORTING:
            return
        self._selection += 1
        self.file_name = file_name
        self.content = content
        self.error = None
        self.success_message = None
        self.state = ImportState.FILE_SELECTED

    def select_bytes(self, data: bytes, file_name: str = "import.tsv") -> bool:
        """Select raw file contents; returns False (and sets ``error``) when they are not UTF-8."""
        if self.state == ImportState.IMPORTING:
            return False
        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            self._selection += 1
            self.error = NOT_UTF8_MESSAGE
            self.success_message = None
            logger.warning("rejected %s: %s", file_name, exc)
            return False
        self.select_text(content, file_name=file_name)
        return True

    def select_file(self, path: Union[str, Path]) -> bool:
        path = Path(path)
        # whole file in memory; the backend takes it in one request
        return self.select_bytes(path.read_bytes(), file_name=path.name)

    def submit(self) -> Optional[ImportResult]:
        if not self.can_submit or self.content is None:
            return None

        self.state = ImportState.IMPORTING
        self.error = None
        self.success_message = None
        logger.info("importing %s (%d bytes)", self.file_name, len(self.content))
        try:
            result = self.api.post_text(IMPORT_PATH, self.content, ImportResult)
        except ApiError as exc:
            self.error = exc.message or "An unknown error occurred during import."
            self.state = ImportState.FILE_SELECTED
            logger.warning("import of %s failed: %s", self.file_name, self.error)
            return None

        self.result = result
        self.success_message = result.summary()
        self.on_success(list(result.imported_records))
        logger.info(
            "import of %s done: %d new, %d skipped",
            self.file_name, result.new_participants_imported, result.rows_skipped,
        )

        self.file_name = None
        self.content = None
        self.state = ImportState.IDLE
        if self.on_close is not None:
            self.scheduler(self.close_delay, self._close_if_untouched(self._selection))
        return result

    def _close_if_untouched(self, selection: int) -> Callable[[], None]:
        def _close() -> None:
            if self._selection != selection or self.state != ImportState.IDLE:
                logger.debug("auto-close skipped; %s picked since", self.file_name)
                return
            assert self.on_close is not None
            self.on_close()

        return _close
