from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from .model import Meeting


class MeetingRepository(Protocol):
    def get_by_id(self, meeting_id: int) -> Optional[Meeting]:
        raise NotImplementedError

    def list_meetings(self, *, group_id: Optional[int] = None) -> Sequence[Meeting]:
        """Newest first: date DESC, time DESC."""

        raise NotImplementedError

    def create_meeting(
        self,
        *,
        group_id: int,
        meeting_date: date,
        meeting_time: time,
        location: str,
        description: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_meeting(
        self,
        meeting_id: int,
        *,
        meeting_date: date,
        meeting_time: time,
        location: str,
        description: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, meeting_id: int) -> bool:
        """Delete a meeting; its attendance rows cascade."""

        raise NotImplementedError
