from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Meeting
from .repository import MeetingRepository

_SELECT = """
    SELECT id, grupo_id, fecha, hora, ubicacion, descripcion, created_at, updated_at
    FROM reuniones
"""


def _to_meeting(row) -> Meeting:
    return Meeting(
        meeting_id=int(row["id"]),
        group_id=int(row["grupo_id"]),
        meeting_date=row["fecha"],
        meeting_time=normalize_mysql_time(row["hora"]),
        location=row["ubicacion"],
        description=row.get("descripcion"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLMeetingRepository(MeetingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, meeting_id: int) -> Optional[Meeting]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE id=%s", (int(meeting_id),))
            row = fetchone(cur)
            return _to_meeting(row) if row else None

    def list_meetings(self, *, group_id: Optional[int] = None) -> Sequence[Meeting]:
        with db_cursor(self._conn_factory) as (_, cur):
            if group_id is None:
                cur.execute(_SELECT + " ORDER BY fecha DESC, hora DESC, id DESC")
            else:
                cur.execute(
                    _SELECT + " WHERE grupo_id=%s ORDER BY fecha DESC, hora DESC, id DESC",
                    (int(group_id),),
                )
            return [_to_meeting(r) for r in fetchall(cur)]

    def create_meeting(
        self,
        *,
        group_id: int,
        meeting_date: date,
        meeting_time: time,
        location: str,
        description: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO reuniones(grupo_id, fecha, hora, ubicacion, descripcion)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(group_id), meeting_date, meeting_time, location, description),
            )
            return int(cur.lastrowid)

    def update_meeting(
        self,
        meeting_id: int,
        *,
        meeting_date: date,
        meeting_time: time,
        location: str,
        description: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE reuniones
                SET fecha=%s, hora=%s, ubicacion=%s, descripcion=%s
                WHERE id=%s
                """,
                (meeting_date, meeting_time, location, description, int(meeting_id)),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM reuniones WHERE id=%s", (int(meeting_id),))
            return fetchone(cur) is not None

    def delete_by_id(self, meeting_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM reuniones WHERE id=%s", (int(meeting_id),))
            return cur.rowcount > 0
