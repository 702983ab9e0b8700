"""
Shared FastAPI dependency helpers.

``get_context`` hands every router the single ``AppContext`` created by
``create_app``; ``require_user`` additionally insists on a live session.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from crisma.context import LOGIN_PATH, AppContext
from crisma.services.list_view import PageController, PageState


class NotLoggedIn(Exception):
    """Raised for data endpoints hit without a session; rendered as 401."""


def get_context(request: Request) -> AppContext:
    ctx: AppContext = request.app.state.context
    ctx.ensure_started()
    return ctx


def require_user(ctx: AppContext = Depends(get_context)) -> AppContext:
    if not ctx.is_authenticated:
        raise NotLoggedIn()
    return ctx


def not_logged_in_body() -> Dict[str, Any]:
    return {"error": "Not logged in", "redirect": LOGIN_PATH}


def ensure_loaded(page: PageController, refresh: bool = False) -> Optional[JSONResponse]:
    """Load the page if needed; returns the error response when loading failed."""
    if refresh or page.state != PageState.READY:
        page.load()
    if page.state == PageState.ERROR:
        return JSONResponse(status_code=502, content={"state": page.state.value, "error": page.error})
    return None
