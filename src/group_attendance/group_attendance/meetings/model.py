from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import format_clock_time, format_date, format_timestamp


@dataclass(frozen=True)
class Meeting:
    """Domain entity: a scheduled meeting of one group."""

    meeting_id: int
    group_id: int
    meeting_date: date
    meeting_time: time
    location: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.meeting_id,
            "grupo_id": self.group_id,
            "fecha": format_date(self.meeting_date),
            "hora": format_clock_time(self.meeting_time),
            "ubicacion": self.location,
            "descripcion": self.description,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }
