from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Person
from .repository import PersonRepository

_COLUMNS = """
    id, nombre, primer_apellido, segundo_apellido, dni, email, telefono,
    puesto_trabajo, observaciones, password_hash, es_admin, activo,
    created_at, updated_at
"""


def _to_person(row: Dict[str, Any]) -> Person:
    return Person(
        person_id=int(row["id"]),
        first_name=row["nombre"],
        first_surname=row["primer_apellido"],
        second_surname=row.get("segundo_apellido"),
        national_id=row.get("dni"),
        email=row["email"],
        phone=row.get("telefono"),
        job_title=row.get("puesto_trabajo"),
        notes=row.get("observaciones"),
        password_hash=row.get("password_hash"),
        is_admin=bool(row.get("es_admin", 0)),
        is_active=bool(row.get("activo", 1)),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLPersonRepository(PersonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, person_id: int) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM personas WHERE id=%s", (int(person_id),))
            row = fetchone(cur)
            return _to_person(row) if row else None

    def get_by_email(self, email: str) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM personas WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_person(row) if row else None

    def list_all(self) -> Sequence[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM personas ORDER BY primer_apellido, nombre, id")
            return [_to_person(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO personas(
                    nombre, primer_apellido, segundo_apellido, dni, email, telefono,
                    puesto_trabajo, observaciones, password_hash, es_admin, activo
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    first_name,
                    first_surname,
                    second_surname,
                    national_id,
                    email,
                    phone,
                    job_title,
                    notes,
                    password_hash,
                    int(is_admin),
                    int(is_active),
                ),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE personas
                SET nombre=%s, primer_apellido=%s, segundo_apellido=%s, dni=%s, email=%s,
                    telefono=%s, puesto_trabajo=%s, observaciones=%s, activo=%s
                WHERE id=%s
                """,
                (
                    first_name,
                    first_surname,
                    second_surname,
                    national_id,
                    email,
                    phone,
                    job_title,
                    notes,
                    int(is_active),
                    int(person_id),
                ),
            )
            # rowcount is 0 when values did not change, so confirm existence.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM personas WHERE id=%s", (int(person_id),))
            return fetchone(cur) is not None

    def set_password_hash(self, person_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE personas SET password_hash=%s WHERE id=%s", (password_hash, int(person_id)))
            return cur.rowcount > 0

    def delete_by_id(self, person_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM personas WHERE id=%s", (int(person_id),))
            return cur.rowcount > 0
