# crisma/api/system.py
from __future__ import annotations

import os
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests
from fastapi import APIRouter, Depends

from crisma import __version__
from crisma.api.deps import get_context
from crisma.context import AppContext

router = APIRouter(tags=["ops"])


@router.get("/health")
def health(ctx: AppContext = Depends(get_context)):
    """Liveness check with a lightweight backend probe and local time."""
    tz = os.getenv("TZ", "UTC")
    try:
        now_local = datetime.now(ZoneInfo(tz)).isoformat()
    except (ZoneInfoNotFoundError, ValueError):
        # no tz database on this host
        now_local = datetime.now(timezone.utc).isoformat()

    backend = {"url": ctx.api.base_url, "status": "skip"}
    try:
        # any HTTP answer means the backend is up; only transport errors count
        ctx.api.session.get(f"{ctx.api.base_url}/", timeout=3)
        backend["status"] = "ok"
    except requests.RequestException as e:
        backend["status"] = f"error: {type(e).__name__}"

    return {
        "status": "ok",
        "time": {"tz": tz, "now": now_local},
        "backend": backend,
        "session": "active" if ctx.is_authenticated else "none",
    }


@router.get("/version")
def version(ctx: AppContext = Depends(get_context)):
    """Minimal runtime info for the UI."""
    return {
        "app": "Crisma App",
        "version": __version__,
        "backend_url": ctx.api.base_url,
    }
