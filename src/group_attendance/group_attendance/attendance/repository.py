from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceEntry, AttendanceRecord, AttendanceSummary


class AttendanceRepository(Protocol):
    def list_for_meeting(self, meeting_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def upsert_many(self, meeting_id: int, entries: Sequence[AttendanceEntry]) -> None:
        """Insert or overwrite one row per (meeting, person), all or nothing.

        Entries are applied in order, so a person listed twice keeps the last
        status and notes.
        """

        raise NotImplementedError

    def summary_for(self, *, person_id: int, group_id: int) -> AttendanceSummary:
        raise NotImplementedError
