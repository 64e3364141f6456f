from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..persons.model import Person
from .model import Membership, term_from_end_date
from .repository import MembershipRepository

_SELECT = """
    SELECT m.id, m.persona_id, m.grupo_id, m.fecha_inicio, m.fecha_fin,
           m.created_at, m.updated_at,
           p.nombre, p.primer_apellido, p.segundo_apellido, p.dni, p.email,
           p.telefono, p.puesto_trabajo, p.observaciones, p.es_admin,
           p.activo AS persona_activo
    FROM miembros m
    JOIN personas p ON p.id = m.persona_id
"""


def _to_membership(row: Dict[str, Any]) -> Membership:
    person = Person(
        person_id=int(row["persona_id"]),
        first_name=row["nombre"],
        first_surname=row["primer_apellido"],
        second_surname=row.get("segundo_apellido"),
        national_id=row.get("dni"),
        email=row["email"],
        phone=row.get("telefono"),
        job_title=row.get("puesto_trabajo"),
        notes=row.get("observaciones"),
        is_admin=bool(row.get("es_admin", 0)),
        is_active=bool(row.get("persona_activo", 1)),
    )
    return Membership(
        membership_id=int(row["id"]),
        person_id=int(row["persona_id"]),
        group_id=int(row["grupo_id"]),
        start_date=row["fecha_inicio"],
        term=term_from_end_date(row.get("fecha_fin")),
        person=person,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLMembershipRepository(MembershipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, membership_id: int) -> Optional[Membership]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE m.id=%s", (int(membership_id),))
            row = fetchone(cur)
            return _to_membership(row) if row else None

    def list_memberships(
        self,
        *,
        group_id: Optional[int] = None,
        person_id: Optional[int] = None,
    ) -> Sequence[Membership]:
        clauses: list[str] = []
        params: list[object] = []
        if group_id is not None:
            clauses.append("m.grupo_id=%s")
            params.append(int(group_id))
        if person_id is not None:
            clauses.append("m.persona_id=%s")
            params.append(int(person_id))

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY m.fecha_inicio ASC, m.id ASC", tuple(params))
            return [_to_membership(r) for r in fetchall(cur)]

    def create_membership(
        self,
        *,
        person_id: int,
        group_id: int,
        start_date: date,
        end_date: Optional[date],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO miembros(persona_id, grupo_id, fecha_inicio, fecha_fin) VALUES(%s,%s,%s,%s)",
                (int(person_id), int(group_id), start_date, end_date),
            )
            return int(cur.lastrowid)

    def update_membership(self, membership_id: int, *, start_date: date, end_date: Optional[date]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE miembros SET fecha_inicio=%s, fecha_fin=%s WHERE id=%s",
                (start_date, end_date, int(membership_id)),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM miembros WHERE id=%s", (int(membership_id),))
            return fetchone(cur) is not None

    def delete_by_id(self, membership_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM miembros WHERE id=%s", (int(membership_id),))
            return cur.rowcount > 0
