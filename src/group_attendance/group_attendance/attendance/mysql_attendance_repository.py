from __future__ import annotations

from typing import Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEntry, AttendanceRecord, AttendanceSummary
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_meeting(self, meeting_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.id, a.reunion_id, a.persona_id, a.estado, a.observaciones,
                       a.created_at, a.updated_at,
                       p.nombre, p.primer_apellido, p.segundo_apellido
                FROM asistencias a
                JOIN personas p ON p.id = a.persona_id
                WHERE a.reunion_id=%s
                ORDER BY p.primer_apellido, p.nombre, a.persona_id
                """,
                (int(meeting_id),),
            )
            return [
                AttendanceRecord(
                    record_id=int(r["id"]),
                    meeting_id=int(r["reunion_id"]),
                    person_id=int(r["persona_id"]),
                    status=AttendanceStatus(r["estado"]),
                    first_name=r["nombre"],
                    first_surname=r["primer_apellido"],
                    second_surname=r.get("segundo_apellido"),
                    notes=r.get("observaciones"),
                    created_at=r.get("created_at"),
                    updated_at=r.get("updated_at"),
                )
                for r in fetchall(cur)
            ]

    def upsert_many(self, meeting_id: int, entries: Sequence[AttendanceEntry]) -> None:
        # Single db_cursor block = single transaction; any failure rolls back all rows.
        with db_cursor(self._conn_factory) as (_, cur):
            for entry in entries:
                cur.execute(
                    """
                    INSERT INTO asistencias(reunion_id, persona_id, estado, observaciones)
                    VALUES(%s,%s,%s,%s) AS new
                    ON DUPLICATE KEY UPDATE estado=new.estado, observaciones=new.observaciones
                    """,
                    (int(meeting_id), int(entry.person_id), entry.status.value, entry.notes),
                )

    def summary_for(self, *, person_id: int, group_id: int) -> AttendanceSummary:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(r.id) AS total,
                       COALESCE(SUM(a.estado = 'asistio'), 0) AS attended,
                       COALESCE(SUM(a.estado = 'excusa'), 0) AS excused
                FROM reuniones r
                LEFT JOIN asistencias a ON a.reunion_id = r.id AND a.persona_id = %s
                WHERE r.grupo_id = %s
                """,
                (int(person_id), int(group_id)),
            )
            row = fetchone(cur) or {}
            return AttendanceSummary(
                total_meetings=int(row.get("total") or 0),
                attended=int(row.get("attended") or 0),
                excused=int(row.get("excused") or 0),
            )
