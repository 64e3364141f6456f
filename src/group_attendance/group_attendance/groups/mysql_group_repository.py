from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Group
from .repository import GroupRepository


def _to_group(row) -> Group:
    return Group(
        group_id=int(row["id"]),
        name=row["nombre"],
        description=row.get("descripcion"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLGroupRepository(GroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, group_id: int) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, nombre, descripcion, created_at, updated_at FROM grupos WHERE id=%s",
                (int(group_id),),
            )
            row = fetchone(cur)
            return _to_group(row) if row else None

    def list_all(self) -> Sequence[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, nombre, descripcion, created_at, updated_at FROM grupos ORDER BY nombre, id")
            return [_to_group(r) for r in fetchall(cur)]

    def create_group(self, *, name: str, description: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO grupos(nombre, descripcion) VALUES(%s,%s)", (name, description))
            return int(cur.lastrowid)

    def update_group(self, group_id: int, *, name: str, description: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE grupos SET nombre=%s, descripcion=%s WHERE id=%s",
                (name, description, int(group_id)),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM grupos WHERE id=%s", (int(group_id),))
            return fetchone(cur) is not None

    def delete_by_id(self, group_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM grupos WHERE id=%s", (int(group_id),))
            return cur.rowcount > 0
