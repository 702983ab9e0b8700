# crisma/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

# Load .env so local runs pick up the backend URL without exporting it
load_dotenv()

DEFAULT_CORS_ORIGINS: Tuple[str, ...] = (
    "http://localhost:3000", "http://127.0.0.1:3000",
    "http://localhost:5173", "http://127.0.0.1:5173",
)


@dataclass(frozen=True)
class Settings:
    api_base_url: str = "http://127.0.0.1:8000"
    # None = wait for the backend as long as it takes
    api_timeout: Optional[float] = None
    import_close_delay: float = 2.0
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)


def _float_or_none(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    return float(raw)


def load_settings() -> Settings:
    base = os.getenv("CRISMA_API_BASE_URL", "").strip() or Settings.api_base_url
    origins_raw = os.getenv("CRISMA_CORS_ORIGINS", "").strip()
    origins = (
        tuple(o.strip() for o in origins_raw.split(",") if o.strip())
        if origins_raw
        else DEFAULT_CORS_ORIGINS
    )
    close_delay = _float_or_none(os.getenv("CRISMA_IMPORT_CLOSE_DELAY"))
    return Settings(
        api_base_url=base.rstrip("/"),
        api_timeout=_float_or_none(os.getenv("CRISMA_API_TIMEOUT")),
        import_close_delay=Settings.import_close_delay if close_delay is None else close_delay,
        log_level=(os.getenv("CRISMA_LOG_LEVEL", "") or "INFO").upper(),
        cors_origins=origins,
    )
