"""Membership entity and activity resolution.

A membership's recorded term is a tagged state: `Active` while no end date
is stored, `Ended(on)` once one is. Whether the membership counts as active
on a given day is always decided by `is_active_on`.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from ..common.datetime_utils import format_date, format_timestamp, today
from ..persons.model import Person


@dataclass(frozen=True)
class Active:
    """No end date recorded: open-ended membership."""


@dataclass(frozen=True)
class Ended:
    on: date


MembershipTerm = Union[Active, Ended]


def term_from_end_date(end_date: Optional[date]) -> MembershipTerm:
    return Ended(end_date) if end_date else Active()


def is_active_on(start_date: date, end_date: Optional[date], reference: date) -> bool:
    """active = reference >= start AND (end is None OR reference <= end)."""
    if reference < start_date:
        return False
    return end_date is None or reference <= end_date


@dataclass(frozen=True)
class Membership:
    membership_id: int
    person_id: int
    group_id: int
    start_date: date
    term: MembershipTerm = Active()
    person: Optional[Person] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def end_date(self) -> Optional[date]:
        return self.term.on if isinstance(self.term, Ended) else None

    def is_active(self, on: Optional[date] = None) -> bool:
        return is_active_on(self.start_date, self.end_date, on or today())

    def to_dict(self, *, on: Optional[date] = None) -> dict:
        data = {
            "id": self.membership_id,
            "persona_id": self.person_id,
            "grupo_id": self.group_id,
            "fecha_inicio": format_date(self.start_date),
            "fecha_fin": format_date(self.end_date),
            "activo": self.is_active(on),
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }
        if self.person is not None:
            data["persona"] = self.person.to_dict()
        return data
