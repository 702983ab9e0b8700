# crisma/api/participants.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from crisma.api.deps import ensure_loaded, require_user
from crisma.context import AppContext
from crisma.schemas import ConfirmandCreate, ConfirmandUpdate
from crisma.services.importer import ImportState
from crisma.services.list_view import CommandInFlight
from crisma.utils import group_label

router = APIRouter(prefix="/participants", tags=["Participants"])
logger = logging.getLogger(__name__)


def _row(c) -> dict:
    data = c.model_dump(mode="json")
    data["current_group_label"] = (
        group_label(c.current_group_start_date)
        if c.current_group_id and c.current_group_start_date
        else None
    )
    return data


@router.get("")
def list_participants(
    q: Optional[str] = Query(None, description="Case-insensitive name search"),
    refresh: bool = False,
    ctx: AppContext = Depends(require_user),
):
    page = ctx.participants
    failed = ensure_loaded(page, refresh)
    if failed is not None:
        return failed
    page.query = q or ""
    rows = page.projection
    return {
        "state": page.state,
        "query": page.query,
        "total": len(page.items),
        "items": [_row(c) for c in rows],
        "error": page.error,
    }


@router.post("", status_code=201)
def create_participant(payload: ConfirmandCreate, ctx: AppContext = Depends(require_user)):
    failed = ensure_loaded(ctx.participants)
    if failed is not None:
        return failed
    created = ctx.participants.create(payload)
    logger.info("participant %s created (%s)", created.id, created.full_name)
    return _row(created)


@router.put("/{participant_id}")
def update_participant(
    participant_id: int,
    payload: ConfirmandUpdate,
    ctx: AppContext = Depends(require_user),
):
    failed = ensure_loaded(ctx.participants)
    if failed is not None:
        return failed
    return _row(ctx.participants.update(participant_id, payload))


@router.delete("/{participant_id}")
def delete_participant(
    participant_id: int,
    confirm: bool = Query(False, description="Must be true; deletion cannot be undone"),
    ctx: AppContext = Depends(require_user),
):
    failed = ensure_loaded(ctx.participants)
    if failed is not None:
        return failed
    if not ctx.participants.delete(participant_id, confirm):
        return JSONResponse(
            status_code=400,
            content={"error": "Confirmation required", "prompt": ctx.participants.delete_prompt},
        )
    logger.info("participant %s deleted", participant_id)
    return {"deleted": participant_id}


# ─────────────────────────────────────────────────────────────────────────────
# Bulk import (text/plain body, TSV rows)
# ─────────────────────────────────────────────────────────────────────────────

def _import_status(widget) -> dict:
    return {
        "open": widget is not None,
        "state": widget.state if widget else None,
        "file_name": widget.file_name if widget else None,
        "error": widget.error if widget else None,
        "message": widget.success_message if widget else None,
    }


@router.get("/import")
def import_status(ctx: AppContext = Depends(require_user)):
    return _import_status(ctx.import_modal)


@router.post("/import")
async def import_participants(
    request: Request,
    file_name: str = Query("import.tsv"),
    ctx: AppContext = Depends(require_user),
):
    widget = ctx.open_import()
    if widget.state == ImportState.IMPORTING:
        raise CommandInFlight("An import is already in progress.")
    if not widget.select_bytes(await request.body(), file_name=file_name):
        return JSONResponse(status_code=400, content=_import_status(widget))
    result = await run_in_threadpool(widget.submit)
    if result is None:
        return JSONResponse(status_code=502, content=_import_status(widget))
    return {
        **_import_status(widget),
        "new_participants_imported": result.new_participants_imported,
        "rows_skipped": result.rows_skipped,
        "imported_records": [_row(c) for c in result.imported_records],
    }


# ─────────────────────────────────────────────────────────────────────────────
# Detail page + sacrament checklist
# ─────────────────────────────────────────────────────────────────────────────

def _detail_body(page) -> dict:
    completed = page.completed_ids
    return {
        "state": page.state,
        "details": page.details,
        "checklist": [
            {"id": s.id, "name": s.name, "completed": s.id in completed}
            for s in page.all_sacraments
        ],
        "error": page.error,
    }


@router.get("/{participant_id}")
def participant_detail(
    participant_id: int,
    refresh: bool = False,
    ctx: AppContext = Depends(require_user),
):
    page = ctx.participant_detail(participant_id)
    failed = ensure_loaded(page, refresh)
    if failed is not None:
        return failed
    return _detail_body(page)


def _toggle(participant_id: int, sacrament_id: int, checked: bool, ctx: AppContext):
    page = ctx.participant_detail(participant_id)
    failed = ensure_loaded(page)
    if failed is not None:
        return failed
    if not page.toggle_sacrament(sacrament_id, checked):
        return JSONResponse(status_code=502, content=jsonable_encoder(_detail_body(page)))
    return _detail_body(page)


@router.put("/{participant_id}/sacraments/{sacrament_id}")
def complete_sacrament(participant_id: int, sacrament_id: int, ctx: AppContext = Depends(require_user)):
    return _toggle(participant_id, sacrament_id, True, ctx)


@router.delete("/{participant_id}/sacraments/{sacrament_id}")
def uncomplete_sacrament(participant_id: int, sacrament_id: int, ctx: AppContext = Depends(require_user)):
    return _toggle(participant_id, sacrament_id, False, ctx)
