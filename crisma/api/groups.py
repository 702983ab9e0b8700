# crisma/api/groups.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from crisma.api.deps import ensure_loaded, require_user
from crisma.context import AppContext
from crisma.schemas import AddParticipantToGroup, ConfirmationGroupCreate, DayOfTheWeek
from crisma.services.groups import REMOVE_MEMBER_PROMPT, GroupMembershipEditor
from crisma.utils import format_date, group_label

router = APIRouter(prefix="/groups", tags=["Groups"])


def _group_row(g) -> dict:
    return {
        **g.model_dump(mode="json"),
        "label": group_label(g.start_date),
        "start_date_display": format_date(g.start_date),
    }


@router.get("")
def list_groups(
    q: Optional[str] = Query(None),
    catechist_q: Optional[str] = Query(None, description="Filter the catechist picker"),
    refresh: bool = False,
    ctx: AppContext = Depends(require_user),
):
    page = ctx.groups
    failed = ensure_loaded(page, refresh)
    if failed is not None:
        return failed
    page.query = q or ""
    return {
        "state": page.state,
        "query": page.query,
        "total": len(page.items),
        "items": [_group_row(g) for g in page.projection],
        "catechist_options": page.catechist_picker(catechist_q or "").options,
        "days": [d.value for d in DayOfTheWeek],
        "error": page.error,
    }


@router.post("", status_code=201)
def create_group(payload: ConfirmationGroupCreate, ctx: AppContext = Depends(require_user)):
    failed = ensure_loaded(ctx.groups)
    if failed is not None:
        return failed
    return _group_row(ctx.groups.create(payload))


# ─────────────────────────────────────────────────────────────────────────────
# Group detail + membership
# ─────────────────────────────────────────────────────────────────────────────

def _editor_body(editor: GroupMembershipEditor, candidate_q: str = "") -> dict:
    group = editor.group
    return {
        "state": editor.state,
        "group": {
            "id": group.id,
            "module": group.module,
            "catechist_name": group.catechist_name or "Unassigned",
            "day_of_the_week": group.day_of_the_week,
            "start_date": format_date(group.start_date),
        } if group else None,
        "members": editor.members,
        "available_candidates": editor.candidate_picker(candidate_q).options,
        "error": editor.error,
    }


@router.get("/{group_id}")
def group_detail(
    group_id: int,
    refresh: bool = False,
    candidate_q: Optional[str] = Query(None, description="Filter the add-participant picker"),
    ctx: AppContext = Depends(require_user),
):
    editor = ctx.group_editor(group_id)
    failed = ensure_loaded(editor, refresh)
    if failed is not None:
        return failed
    return _editor_body(editor, candidate_q or "")


@router.post("/{group_id}/members", status_code=201)
def add_member(group_id: int, payload: AddParticipantToGroup, ctx: AppContext = Depends(require_user)):
    editor = ctx.group_editor(group_id)
    failed = ensure_loaded(editor)
    if failed is not None:
        return failed
    if editor.add_member(payload.confirmand_id) is None and editor.error:
        return JSONResponse(status_code=400, content={"error": editor.error})
    return _editor_body(editor)


@router.delete("/{group_id}/members/{participant_id}")
def remove_member(
    group_id: int,
    participant_id: int,
    confirm: bool = Query(False),
    ctx: AppContext = Depends(require_user),
):
    editor = ctx.group_editor(group_id)
    failed = ensure_loaded(editor)
    if failed is not None:
        return failed
    if not editor.remove_member(participant_id, confirm):
        return JSONResponse(
            status_code=400,
            content={"error": "Confirmation required", "prompt": REMOVE_MEMBER_PROMPT},
        )
    return _editor_body(editor)
