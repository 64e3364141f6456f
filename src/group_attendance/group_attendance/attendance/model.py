from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_timestamp
from ..core.enums import AttendanceStatus
from ..persons.model import display_name


@dataclass(frozen=True)
class AttendanceEntry:
    """One line of an attendance sheet as submitted by the client."""

    person_id: int
    status: AttendanceStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Stored attendance row joined with the person's name (read model)."""

    record_id: int
    meeting_id: int
    person_id: int
    status: AttendanceStatus
    first_name: str
    first_surname: str
    second_surname: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def person_name(self) -> str:
        return display_name(self.first_name, self.first_surname, self.second_surname)

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "reunion_id": self.meeting_id,
            "persona_id": self.person_id,
            "estado": self.status.value,
            "observaciones": self.notes,
            "nombre": self.first_name,
            "primer_apellido": self.first_surname,
            "segundo_apellido": self.second_surname,
            "persona_nombre": self.person_name,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }


@dataclass(frozen=True)
class AttendanceSummary:
    """Attendance of one person across all meetings of one group.

    `absent` counts both explicit absences and meetings with no record.
    """

    total_meetings: int = 0
    attended: int = 0
    excused: int = 0

    @property
    def absent(self) -> int:
        return max(self.total_meetings - self.attended - self.excused, 0)

    @property
    def attendance_rate(self) -> int:
        if not self.total_meetings:
            return 0
        return round(self.attended * 100 / self.total_meetings)

    def to_dict(self) -> dict:
        return {
            "totalReuniones": self.total_meetings,
            "asistencias": self.attended,
            "excusas": self.excused,
            "inasistencias": self.absent,
            "porcentaje": self.attendance_rate,
        }
