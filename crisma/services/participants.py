# crisma/services/participants.py
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Set

from crisma.api_client import ApiClient, ApiError
from crisma.schemas import Confirmand, ConfirmandDetails, Sacrament, UpdateParticipantSacrament
from crisma.services.list_view import CommandInFlight, ListViewController, PageController

logger = logging.getLogger(__name__)

SACRAMENT_UPDATE_FAILED = "Error updating sacrament. Please refresh and try again."


class ParticipantsController(ListViewController[Confirmand]):
    path = "/api/confirmands"
    model = Confirmand
    delete_prompt = (
        "Are you sure you want to delete this participant? This action cannot be undone."
    )


class ParticipantDetailController(PageController):
    """One participant's profile, group history and sacrament checklist."""

    def __init__(self, api: ApiClient, participant_id: int) -> None:
        super().__init__(api)
        self.participant_id = participant_id
        self.details: Optional[ConfirmandDetails] = None
        self.all_sacraments: List[Sacrament] = []

    @property
    def base_path(self) -> str:
        return f"/api/confirmands/{self.participant_id}"

    def _fetchers(self) -> List[Callable[[], Any]]:
        return [
            lambda: self.api.get(f"{self.base_path}/details", ConfirmandDetails),
            lambda: self.api.get("/api/sacraments", List[Sacrament]),
        ]

    def _apply_loaded(self, results: List[Any]) -> None:
        self.details, self.all_sacraments = results[0], list(results[1])

    @property
    def completed_ids(self) -> Set[int]:
        if self.details is None:
            return set()
        return {s.id for s in self.details.sacraments}

    def _set_completed(self, sacraments: List[Sacrament]) -> None:
        assert self.details is not None
        self.details = self.details.model_copy(update={"sacraments": sacraments})

    def toggle_sacrament(self, sacrament_id: int, checked: bool) -> bool:
        """Mark a sacrament completed (``checked``) or not.

        The checklist flips immediately and flips back if the backend refuses.
        Returns True when the backend accepted the change.
        """
        if self.details is None:
            return False
        sacrament = next((s for s in self.all_sacraments if s.id == sacrament_id), None)
        if sacrament is None:
            self.error = f"Unknown sacrament {sacrament_id}"
            return False

        previous = list(self.details.sacraments)
        if checked:
            if sacrament_id not in self.completed_ids:
                self._set_completed([*previous, sacrament])
        else:
            self._set_completed([s for s in previous if s.id != sacrament_id])

        url = f"{self.base_path}/sacraments"
        try:
            if checked:
                self._command(
                    lambda: self.api.post_no_content(
                        url, UpdateParticipantSacrament(sacrament_id=sacrament_id)
                    )
                )
            else:
                self._command(lambda: self.api.delete(f"{url}/{sacrament_id}"))
        except ApiError:
            logger.warning(
                "sacrament %s toggle for participant %s rejected; rolling back",
                sacrament_id, self.participant_id,
            )
            self._set_completed(previous)
            self.error = SACRAMENT_UPDATE_FAILED
            return False
        except CommandInFlight:
            self._set_completed(previous)
            raise
        return True
