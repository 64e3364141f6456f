from __future__ import annotations

from typing import Any, Sequence

from ..common.logging_utils import get_logger
from ..common.validators import optional_text, require_id
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from ..meetings.repository import MeetingRepository
from ..memberships.model import Membership
from ..memberships.service import MembershipService
from ..persons.repository import PersonRepository
from .model import AttendanceEntry, AttendanceRecord, AttendanceSummary
from .repository import AttendanceRepository

logger = get_logger(__name__)

VALID_STATUSES = ", ".join(s.value for s in AttendanceStatus)


def parse_entries(raw: Any) -> list[AttendanceEntry]:
    """Validate an attendance sheet before anything is written."""
    if not isinstance(raw, list):
        raise ValidationError("Se esperaba un arreglo de asistencias")

    entries: list[AttendanceEntry] = []
    for position, item in enumerate(raw, start=1):
        if not isinstance(item, dict):
            raise ValidationError(f"Asistencia #{position} no es válida")

        person_id = require_id(item.get("persona_id"), f"persona_id (asistencia #{position})")
        try:
            status = AttendanceStatus(item.get("estado"))
        except ValueError:
            raise ValidationError(f"Estado de asistencia no válido (asistencia #{position}); use: {VALID_STATUSES}")

        entries.append(AttendanceEntry(person_id=person_id, status=status, notes=optional_text(item.get("observaciones"))))
    return entries


class AttendanceService:
    """Use case: attendance sheets per meeting and per-person statistics."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        meetings: MeetingRepository,
        persons: PersonRepository,
        groups: GroupRepository,
        memberships: MembershipService,
    ):
        self._attendance = attendance
        self._meetings = meetings
        self._persons = persons
        self._groups = groups
        self._memberships = memberships

    def _require_meeting(self, meeting_id: int):
        meeting = self._meetings.get_by_id(int(meeting_id))
        if not meeting:
            raise NotFoundError("Reunión no encontrada")
        return meeting

    def list_attendance(self, meeting_id: int) -> Sequence[AttendanceRecord]:
        self._require_meeting(meeting_id)
        return self._attendance.list_for_meeting(int(meeting_id))

    def save_attendance(self, meeting_id: int, raw_entries: Any) -> Sequence[AttendanceRecord]:
        """Bulk upsert of a meeting's attendance sheet.

        Returns the refreshed list for the meeting.
        """
        entries = parse_entries(raw_entries)
        meeting = self._require_meeting(meeting_id)

        if entries:
            self._attendance.upsert_many(meeting.meeting_id, entries)
            logger.info("Attendance saved meeting=%s rows=%s", meeting.meeting_id, len(entries))

        return self._attendance.list_for_meeting(meeting.meeting_id)

    def meeting_roster(self, meeting_id: int) -> Sequence[Membership]:
        """Members of the meeting's group who were active on the meeting date."""
        meeting = self._require_meeting(meeting_id)
        return self._memberships.roster(meeting.group_id, on=meeting.meeting_date)

    def summary(self, *, person_id: int, group_id: int) -> AttendanceSummary:
        if not self._persons.get_by_id(int(person_id)):
            raise NotFoundError("Usuario no encontrado")
        if not self._groups.get_by_id(int(group_id)):
            raise NotFoundError("Grupo no encontrado")
        return self._attendance.summary_for(person_id=int(person_id), group_id=int(group_id))
