# crisma/schemas/imports.py
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from .confirmands import Confirmand


class ImportResult(BaseModel):
    """Body returned by the backend for a bulk TSV import."""
    new_participants_imported: int
    rows_skipped: int
    imported_records: List[Confirmand] = Field(default_factory=list)

    def summary(self) -> str:
        return (
            f"Import successful! {self.new_participants_imported} new participants added. "
            f"{self.rows_skipped} rows skipped."
        )
