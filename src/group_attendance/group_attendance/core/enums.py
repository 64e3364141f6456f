from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Estado de asistencia de una persona a una reunión (valor guardado en BD)."""

    ATTENDED = "asistio"
    ABSENT = "no_asistio"
    EXCUSED = "excusa"
