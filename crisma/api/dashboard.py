# crisma/api/dashboard.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from crisma.api.deps import ensure_loaded, require_user
from crisma.context import AppContext

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("")
def dashboard(ctx: AppContext = Depends(require_user)):
    # counters move whenever anyone edits data, so always refetch
    failed = ensure_loaded(ctx.dashboard, refresh=True)
    if failed is not None:
        return failed
    return {"state": ctx.dashboard.state, "stats": ctx.dashboard.stats, "user": ctx.user}
