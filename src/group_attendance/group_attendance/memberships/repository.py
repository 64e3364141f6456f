from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Membership


class MembershipRepository(Protocol):
    def get_by_id(self, membership_id: int) -> Optional[Membership]:
        raise NotImplementedError

    def list_memberships(
        self,
        *,
        group_id: Optional[int] = None,
        person_id: Optional[int] = None,
    ) -> Sequence[Membership]:
        """List memberships joined with their person, oldest start first."""

        raise NotImplementedError

    def create_membership(
        self,
        *,
        person_id: int,
        group_id: int,
        start_date: date,
        end_date: Optional[date],
    ) -> int:
        raise NotImplementedError

    def update_membership(self, membership_id: int, *, start_date: date, end_date: Optional[date]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, membership_id: int) -> bool:
        raise NotImplementedError
