# crisma/api/session.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from crisma.api.deps import get_context
from crisma.context import AppContext
from crisma.schemas import LoginPayload

router = APIRouter(prefix="/session", tags=["Session"])


@router.get("")
def current_session(
    path: Optional[str] = Query(None, description="Page the operator is on"),
    ctx: AppContext = Depends(get_context),
):
    return {
        "user": ctx.user,
        "redirect": ctx.redirect_for(path) if path else None,
    }


@router.post("/login")
def login(payload: LoginPayload, ctx: AppContext = Depends(get_context)):
    user = ctx.login(payload)
    return {"user": user, "redirect": ctx.redirect_for("/login")}


@router.post("/logout")
def logout(ctx: AppContext = Depends(get_context)):
    return {"user": None, "redirect": ctx.logout()}
