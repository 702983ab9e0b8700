# crisma/api/catechists.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from crisma.api.deps import ensure_loaded, require_user
from crisma.context import AppContext
from crisma.schemas import CatechistCreate

router = APIRouter(prefix="/catechists", tags=["Catechists"])


@router.get("")
def list_catechists(
    q: Optional[str] = Query(None),
    refresh: bool = False,
    ctx: AppContext = Depends(require_user),
):
    page = ctx.catechists
    failed = ensure_loaded(page, refresh)
    if failed is not None:
        return failed
    page.query = q or ""
    return {
        "state": page.state,
        "query": page.query,
        "total": len(page.items),
        "items": [
            {**c.model_dump(mode="json"), "status": "Active" if c.currently_active else "Inactive"}
            for c in page.projection
        ],
        "error": page.error,
    }


@router.post("", status_code=201)
def create_catechist(payload: CatechistCreate, ctx: AppContext = Depends(require_user)):
    failed = ensure_loaded(ctx.catechists)
    if failed is not None:
        return failed
    return ctx.catechists.create(payload)


@router.get("/{catechist_id}")
def catechist_detail(catechist_id: int, refresh: bool = False, ctx: AppContext = Depends(require_user)):
    page = ctx.catechist_detail(catechist_id)
    failed = ensure_loaded(page, refresh)
    if failed is not None:
        return failed
    return {"state": page.state, "details": page.details}
