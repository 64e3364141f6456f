from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_clock_time, parse_iso_date
from ..common.logging_utils import get_logger
from ..common.validators import optional_text, require_id
from ..core.exceptions import NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from .model import Meeting
from .repository import MeetingRepository

logger = get_logger(__name__)

REQUIRED_FIELDS = ("grupo_id", "fecha", "hora", "ubicacion")


class MeetingService:
    def __init__(self, meetings: MeetingRepository, groups: GroupRepository):
        self._meetings = meetings
        self._groups = groups

    def list_meetings(self, *, group_id: Optional[int] = None) -> Sequence[Meeting]:
        return self._meetings.list_meetings(group_id=group_id)

    def get_meeting(self, meeting_id: int) -> Meeting:
        meeting = self._meetings.get_by_id(int(meeting_id))
        if not meeting:
            raise NotFoundError("Reunión no encontrada")
        return meeting

    def create_meeting(self, payload: Mapping[str, Any]) -> Meeting:
        missing = [f for f in REQUIRED_FIELDS if payload.get(f) in (None, "")]
        if missing:
            raise ValidationError(f"Faltan campos requeridos: {', '.join(missing)}")

        group_id = require_id(payload.get("grupo_id"), "grupo_id")
        meeting_date = parse_iso_date(payload.get("fecha"), "fecha")
        meeting_time = parse_clock_time(payload.get("hora"), "hora")
        location = optional_text(payload.get("ubicacion"))
        if not location:
            raise ValidationError("Faltan campos requeridos: ubicacion")

        if not self._groups.get_by_id(group_id):
            raise ValidationError("El grupo especificado no existe")

        meeting_id = self._meetings.create_meeting(
            group_id=group_id,
            meeting_date=meeting_date,
            meeting_time=meeting_time,
            location=location,
            description=optional_text(payload.get("descripcion")),
        )
        logger.info("Meeting created id=%s group=%s date=%s", meeting_id, group_id, meeting_date)
        return self.get_meeting(meeting_id)

    def update_meeting(self, meeting_id: int, payload: Mapping[str, Any]) -> Meeting:
        """Update date, time, location or description; absent keys keep their value.

        A meeting never moves to another group.
        """
        current = self.get_meeting(meeting_id)

        meeting_date = current.meeting_date
        if payload.get("fecha") is not None:
            meeting_date = parse_iso_date(payload.get("fecha"), "fecha")

        meeting_time = current.meeting_time
        if payload.get("hora") is not None:
            meeting_time = parse_clock_time(payload.get("hora"), "hora")

        location = current.location
        if "ubicacion" in payload:
            location = optional_text(payload.get("ubicacion"))
            if not location:
                raise ValidationError("La ubicación es requerida")

        description = current.description
        if "descripcion" in payload:
            description = optional_text(payload.get("descripcion"))

        if not self._meetings.update_meeting(
            current.meeting_id,
            meeting_date=meeting_date,
            meeting_time=meeting_time,
            location=location,
            description=description,
        ):
            raise NotFoundError("Reunión no encontrada")
        return self.get_meeting(current.meeting_id)

    def delete_meeting(self, meeting_id: int) -> None:
        if not self._meetings.delete_by_id(int(meeting_id)):
            raise NotFoundError("Reunión no encontrada")
        logger.info("Meeting deleted id=%s (attendance cascaded)", meeting_id)
