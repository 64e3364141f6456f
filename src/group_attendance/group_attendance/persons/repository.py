from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Person


class PersonRepository(Protocol):
    """Repository interface for Person.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, person_id: int) -> Optional[Person]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Person]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Person]:
        raise NotImplementedError

    def create_person(
        self,
        *,
        first_name: str,
        first_surname: str,
        second_surname: Optional[str],
        national_id: Optional[str],
        email: str,
        phone: Optional[str],
        job_title: Optional[str],
        notes: Optional[str],
        password_hash: Optional[str],
        is_admin: bool,
        is_active: bool,
    ) -> int:
        raise NotImplementedError

    def update_person(
        self,
        person_id: int,
        *,
        first_name: str,
        first_surname: str,
        second_surname: Optional[str],
        national_id: Optional[str],
        email: str,
        phone: Optional[str],
        job_title: Optional[str],
        notes: Optional[str],
        is_active: bool,
    ) -> bool:
        raise NotImplementedError

    def set_password_hash(self, person_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, person_id: int) -> bool:
        """Hard delete; memberships and attendance go with it (FK cascade)."""

        raise NotImplementedError
