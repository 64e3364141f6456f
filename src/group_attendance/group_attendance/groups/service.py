from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..common.logging_utils import get_logger
from ..common.validators import optional_text
from ..core.exceptions import NotFoundError, ValidationError
from .model import Group
from .repository import GroupRepository

logger = get_logger(__name__)


def _require_name(payload: Mapping[str, Any]) -> str:
    name = optional_text(payload.get("nombre"))
    if not name:
        raise ValidationError("El nombre es requerido")
    return name


class GroupService:
    def __init__(self, groups: GroupRepository):
        self._groups = groups

    def list_groups(self) -> Sequence[Group]:
        return self._groups.list_all()

    def get_group(self, group_id: int) -> Group:
        group = self._groups.get_by_id(int(group_id))
        if not group:
            raise NotFoundError("Grupo no encontrado")
        return group

    def create_group(self, payload: Mapping[str, Any]) -> Group:
        name = _require_name(payload)
        group_id = self._groups.create_group(name=name, description=optional_text(payload.get("descripcion")))
        logger.info("Group created id=%s", group_id)
        return self.get_group(group_id)

    def update_group(self, group_id: int, payload: Mapping[str, Any]) -> Group:
        name = _require_name(payload)
        if not self._groups.update_group(int(group_id), name=name, description=optional_text(payload.get("descripcion"))):
            raise NotFoundError("Grupo no encontrado")
        return self.get_group(group_id)

    def delete_group(self, group_id: int) -> None:
        if not self._groups.delete_by_id(int(group_id)):
            raise NotFoundError("Grupo no encontrado")
        logger.info("Group deleted id=%s (memberships and meetings cascaded)", group_id)
