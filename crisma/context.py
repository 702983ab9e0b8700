# crisma/context.py
"""
Application context: the one object that owns the backend client, the
operator's session and every page controller.

It is created once by ``create_app`` and handed to routers through a FastAPI
dependency; nothing here is module-level state.
"""
from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from crisma.api_client import ApiClient, ApiError
from crisma.config import Settings, load_settings
from crisma.schemas import Confirmand, LoginPayload, User
from crisma.services.catechists import CatechistDetailController, CatechistsController
from crisma.services.dashboard import DashboardController
from crisma.services.groups import GroupMembershipEditor, GroupsController
from crisma.services.importer import ImportWidget
from crisma.services.list_view import PageState
from crisma.services.participants import ParticipantDetailController, ParticipantsController

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
HOME_PATH = "/home"


class AppContext:
    def __init__(self, settings: Optional[Settings] = None, api: Optional[ApiClient] = None) -> None:
        self.settings = settings or load_settings()
        self.api = api or ApiClient(self.settings.api_base_url, timeout=self.settings.api_timeout)

        self.user: Optional[User] = None
        self.is_loading = True
        self._start_lock = threading.Lock()

        self._reset_pages()

    def _reset_pages(self) -> None:
        self.participants = ParticipantsController(self.api)
        self.participants.subscribe(self._sync_rosters)
        self.catechists = CatechistsController(self.api)
        self.groups = GroupsController(self.api)
        self.dashboard = DashboardController(self.api)
        self.group_editors: Dict[int, GroupMembershipEditor] = {}
        self.participant_details: Dict[int, ParticipantDetailController] = {}
        self.catechist_details: Dict[int, CatechistDetailController] = {}
        self.import_modal: Optional[ImportWidget] = None

    # ---- session lifecycle ----------------------------------------------------

    def start(self) -> Optional[User]:
        """Ask the backend whether the stored cookie is still a live session."""
        try:
            self.user = self.api.get("/api/auth/me", User)
        except ApiError as exc:
            logger.info("no active session (%s)", exc.message)
            self.user = None
        finally:
            self.is_loading = False
        return self.user

    def ensure_started(self) -> None:
        if not self.is_loading:
            return
        with self._start_lock:
            if self.is_loading:
                self.start()

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def login(self, payload: LoginPayload) -> User:
        user = self.api.post("/api/auth/login", payload, User)
        self.user = user
        self.is_loading = False
        logger.info("logged in as %s", user.username)
        return user

    def logout(self) -> str:
        """Clear the session locally and on the backend; returns where to go next."""
        try:
            self.api.post_no_content("/api/auth/logout")
        except ApiError as exc:
            logger.warning("backend logout failed: %s", exc.message)
        finally:
            self.user = None
            self.api.session.cookies.clear()
            self._reset_pages()
        return LOGIN_PATH

    def redirect_for(self, path: str) -> Optional[str]:
        """Where a visitor on ``path`` should be sent, or None to stay."""
        if self.is_loading:
            return None
        on_login_page = path == LOGIN_PATH
        if self.user is None and not on_login_page:
            return LOGIN_PATH
        if self.user is not None and on_login_page:
            return HOME_PATH
        return None

    # ---- per-record pages -------------------------------------------------------

    def _sync_rosters(self, roster: List[Confirmand]) -> None:
        # an unloaded list only holds what was merged into it, not the roster
        if self.participants.state != PageState.READY:
            return
        for editor in list(self.group_editors.values()):
            if editor.state == PageState.READY:
                editor.set_roster(roster)

    def group_editor(self, group_id: int) -> GroupMembershipEditor:
        editor = self.group_editors.get(group_id)
        if editor is None:
            editor = self.group_editors[group_id] = GroupMembershipEditor(self.api, group_id)
        return editor

    def participant_detail(self, participant_id: int) -> ParticipantDetailController:
        page = self.participant_details.get(participant_id)
        if page is None:
            page = ParticipantDetailController(self.api, participant_id)
            self.participant_details[participant_id] = page
        return page

    def catechist_detail(self, catechist_id: int) -> CatechistDetailController:
        page = self.catechist_details.get(catechist_id)
        if page is None:
            page = CatechistDetailController(self.api, catechist_id)
            self.catechist_details[catechist_id] = page
        return page

    # ---- import modal ---------------------------------------------------------------

    def open_import(self) -> ImportWidget:
        widget = self.import_modal
        if widget is None:
            widget = ImportWidget(
                self.api,
                on_success=self.participants.merge,
                close_delay=self.settings.import_close_delay,
            )
            widget.on_close = lambda: self.close_import(widget)
            self.import_modal = widget
        return widget

    def close_import(self, widget: Optional[ImportWidget] = None) -> None:
        """Close the import modal; with ``widget``, only if it is still the open one."""
        if widget is None or self.import_modal is widget:
            self.import_modal = None
