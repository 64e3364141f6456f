from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Group


class GroupRepository(Protocol):
    def get_by_id(self, group_id: int) -> Optional[Group]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Group]:
        raise NotImplementedError

    def create_group(self, *, name: str, description: Optional[str]) -> int:
        raise NotImplementedError

    def update_group(self, group_id: int, *, name: str, description: Optional[str]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, group_id: int) -> bool:
        """Delete a group; memberships, meetings and their attendance cascade."""

        raise NotImplementedError
