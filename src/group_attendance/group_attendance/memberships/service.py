from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date, parse_optional_date, today
from ..common.logging_utils import get_logger
from ..common.validators import require_id
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from ..persons.repository import PersonRepository
from .model import Membership
from .repository import MembershipRepository

logger = get_logger(__name__)


def _check_range(start_date: date, end_date: Optional[date]) -> None:
    if end_date is not None and end_date < start_date:
        raise ValidationError("La fecha de fin no puede ser anterior a la fecha de inicio")


class MembershipService:
    """Use case: group rosters with time-bounded membership."""

    def __init__(self, memberships: MembershipRepository, persons: PersonRepository, groups: GroupRepository):
        self._memberships = memberships
        self._persons = persons
        self._groups = groups

    def list_memberships(
        self,
        *,
        group_id: Optional[int] = None,
        person_id: Optional[int] = None,
        active: Optional[bool] = None,
        on: Optional[date] = None,
    ) -> Sequence[Membership]:
        """List memberships, optionally keeping only those (in)active on `on` (default today)."""
        items = self._memberships.list_memberships(group_id=group_id, person_id=person_id)
        if active is None:
            return list(items)
        reference = on or today()
        return [m for m in items if m.is_active(reference) == active]

    def roster(self, group_id: int, *, on: date) -> Sequence[Membership]:
        """Members of a group active on the given day (e.g. a meeting's date)."""
        return self.list_memberships(group_id=group_id, active=True, on=on)

    def get_membership(self, membership_id: int) -> Membership:
        membership = self._memberships.get_by_id(int(membership_id))
        if not membership:
            raise NotFoundError("Miembro no encontrado")
        return membership

    def create_membership(self, payload: Mapping[str, Any]) -> Membership:
        if not payload.get("persona_id") or not payload.get("grupo_id"):
            raise ValidationError("ID de persona y grupo son requeridos")

        person_id = require_id(payload.get("persona_id"), "persona_id")
        group_id = require_id(payload.get("grupo_id"), "grupo_id")
        start_date = parse_optional_date(payload.get("fecha_inicio"), "fecha_inicio") or today()
        end_date = parse_optional_date(payload.get("fecha_fin"), "fecha_fin")
        _check_range(start_date, end_date)

        if not self._persons.get_by_id(person_id):
            raise ValidationError("La persona especificada no existe")
        if not self._groups.get_by_id(group_id):
            raise ValidationError("El grupo especificado no existe")

        for existing in self._memberships.list_memberships(group_id=group_id, person_id=person_id):
            if existing.start_date == start_date:
                raise ConflictError("La persona ya tiene una membresía con esa fecha de inicio en el grupo")

        membership_id = self._memberships.create_membership(
            person_id=person_id,
            group_id=group_id,
            start_date=start_date,
            end_date=end_date,
        )
        logger.info("Membership created id=%s person=%s group=%s", membership_id, person_id, group_id)
        return self.get_membership(membership_id)

    def update_membership(self, membership_id: int, payload: Mapping[str, Any]) -> Membership:
        current = self.get_membership(membership_id)

        start_date = current.start_date
        if payload.get("fecha_inicio"):
            start_date = parse_iso_date(payload.get("fecha_inicio"), "fecha_inicio")

        # An explicit null clears the end date; an absent key keeps it.
        end_date = current.end_date
        if "fecha_fin" in payload:
            end_date = parse_optional_date(payload.get("fecha_fin"), "fecha_fin")

        _check_range(start_date, end_date)

        if start_date != current.start_date:
            for other in self._memberships.list_memberships(group_id=current.group_id, person_id=current.person_id):
                if other.membership_id != current.membership_id and other.start_date == start_date:
                    raise ConflictError("La persona ya tiene una membresía con esa fecha de inicio en el grupo")

        if not self._memberships.update_membership(current.membership_id, start_date=start_date, end_date=end_date):
            raise NotFoundError("Miembro no encontrado")
        return self.get_membership(current.membership_id)

    def end_membership(self, membership_id: int, *, on: Optional[date] = None) -> Optional[Membership]:
        """Remove a member from the group while keeping the history.

        Sets the end date to `on` (default today). A membership that starts
        after that day never became active and is deleted instead; returns
        None in that case.
        """
        current = self.get_membership(membership_id)
        end_on = on or today()

        if current.start_date > end_on:
            self.delete_membership(current.membership_id)
            return None

        if current.end_date is not None and current.end_date <= end_on:
            return current

        self._memberships.update_membership(current.membership_id, start_date=current.start_date, end_date=end_on)
        logger.info("Membership ended id=%s on=%s", current.membership_id, end_on)
        return self.get_membership(current.membership_id)

    def delete_membership(self, membership_id: int) -> None:
        if not self._memberships.delete_by_id(int(membership_id)):
            raise NotFoundError("Miembro no encontrado")
        logger.info("Membership deleted id=%s", membership_id)
