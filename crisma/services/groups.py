# crisma/services/groups.py
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Tuple

from crisma.api_client import ApiClient
from crisma.schemas import (
    AddParticipantToGroup,
    Catechist,
    Confirmand,
    ConfirmationGroup,
    ConfirmationGroupDetails,
)
from crisma.services.list_view import Confirm, ListViewController, PageController, is_confirmed
from crisma.services.projection import sort_by_name
from crisma.utils import PickerItem, SearchablePicker, group_label

logger = logging.getLogger(__name__)

SELECT_PARTICIPANT_MESSAGE = "Please select a participant to add."
REMOVE_MEMBER_PROMPT = "Are you sure you want to remove this participant from the group?"


def group_display_name(group: ConfirmationGroup) -> str:
    """Searchable name for a group row: module, catechist and semester."""
    catechist = group.catechist_name or "Unassigned"
    return f"Module {group.module} - {catechist} - {group_label(group.start_date)}"


def _by_full_name(person: Any) -> str:
    return person.full_name


class GroupsController(ListViewController[ConfirmationGroup]):
    """Group list plus the catechist roster needed by the "add group" form."""

    path = "/api/groups"
    model = ConfirmationGroup

    def __init__(self, api: ApiClient) -> None:
        super().__init__(api)
        self.catechists: List[Catechist] = []

    def name_of(self, item: ConfirmationGroup) -> str:
        return group_display_name(item)

    def _fetchers(self) -> List[Callable[[], Any]]:
        return [
            lambda: self.api.get(self.path, List[ConfirmationGroup]),
            lambda: self.api.get("/api/catechists", List[Catechist]),
        ]

    def _apply_loaded(self, results: List[Any]) -> None:
        self._replace_items(results[0])
        self.catechists = sort_by_name(results[1], _by_full_name)

    def catechist_options(self) -> List[PickerItem]:
        return [PickerItem(id=c.id, name=c.full_name) for c in self.catechists]

    def catechist_picker(self, query: str = "") -> SearchablePicker[PickerItem]:
        picker = SearchablePicker(self.catechist_options())
        picker.query = query or ""
        return picker


class GroupMembershipEditor(PageController):
    """Members of one group, and the participants that could still join it."""

    def __init__(self, api: ApiClient, group_id: int) -> None:
        super().__init__(api)
        self.group_id = group_id
        self.group: Optional[ConfirmationGroupDetails] = None
        self.all_participants: List[Confirmand] = []
        self._version = 0
        self._candidates_memo: Optional[Tuple[int, List[Confirmand]]] = None

    @property
    def base_path(self) -> str:
        return f"/api/groups/{self.group_id}"

    def _fetchers(self) -> List[Callable[[], Any]]:
        return [
            lambda: self.api.get(self.base_path, ConfirmationGroupDetails),
            lambda: self.api.get("/api/confirmands", List[Confirmand]),
        ]

    def _apply_loaded(self, results: List[Any]) -> None:
        group, roster = results
        self.all_participants = list(roster)
        self._set_members(group, group.members)

    # ---- members ----------------------------------------------------------------

    @property
    def members(self) -> List[Confirmand]:
        return list(self.group.members) if self.group else []

    def _set_members(self, group: ConfirmationGroupDetails, members: List[Confirmand]) -> None:
        self.group = group.model_copy(update={"members": sort_by_name(members, _by_full_name)})
        self._version += 1

    @property
    def available_candidates(self) -> List[Confirmand]:
        """All participants minus current members, by id."""
        if self._candidates_memo is None or self._candidates_memo[0] != self._version:
            member_ids = {m.id for m in self.members}
            candidates = [p for p in self.all_participants if p.id not in member_ids]
            self._candidates_memo = (self._version, sort_by_name(candidates, _by_full_name))
        return list(self._candidates_memo[1])

    def set_roster(self, participants: List[Confirmand]) -> None:
        self.all_participants = list(participants)
        self._version += 1

    def candidate_picker(self, query: str = "") -> SearchablePicker[PickerItem]:
        picker = SearchablePicker([PickerItem(id=p.id, name=p.full_name) for p in self.available_candidates])
        picker.query = query or ""
        return picker

    # ---- commands -----------------------------------------------------------------

    def add_member(self, participant_id: Optional[int]) -> Optional[Confirmand]:
        if self.group is None:
            return None
        if not participant_id:
            self.error = SELECT_PARTICIPANT_MESSAGE
            return None
        payload = AddParticipantToGroup(confirmand_id=participant_id)

        def _apply(_: Any) -> None:
            person = next((p for p in self.all_participants if p.id == participant_id), None)
            if person is None or self.group is None:
                logger.warning(
                    "participant %s added to group %s but missing from roster",
                    participant_id, self.group_id,
                )
                return
            if any(m.id == participant_id for m in self.group.members):
                return
            self._set_members(self.group, [*self.group.members, person])

        self._command(
            lambda: self.api.post_no_content(f"{self.base_path}/participants", payload), _apply
        )
        return next((m for m in self.members if m.id == participant_id), None)

    def remove_member(self, participant_id: int, confirm: Confirm) -> bool:
        if self.group is None or not is_confirmed(confirm, REMOVE_MEMBER_PROMPT):
            return False

        def _apply(_: Any) -> None:
            assert self.group is not None
            self._set_members(
                self.group, [m for m in self.group.members if m.id != participant_id]
            )

        self._command(
            lambda: self.api.delete(f"{self.base_path}/participants/{participant_id}"), _apply
        )
        return True
