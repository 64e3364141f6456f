from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector

from ..common.logging_utils import get_logger
from ..core.exceptions import ConflictError, ValidationError
from .connection import DatabaseConnection

logger = get_logger(__name__)

# MySQL error numbers
ER_DUP_ENTRY = 1062
ER_NO_REFERENCED_ROW = 1452


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction.

    Everything executed inside the block is committed together; any error
    rolls the whole block back. Integrity violations surface as ConflictError,
    out-of-range or malformed values as ValidationError.
    """
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        logger.warning("Integrity error rolled back: errno=%s msg=%s", e.errno, e.msg)
        raise ConflictError(_conflict_message(e)) from e
    except mysql.connector.DataError as e:
        conn.rollback()
        logger.warning("Data error rolled back: errno=%s msg=%s", e.errno, e.msg)
        raise ValidationError("Valor fuera de rango o no válido") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _conflict_message(error: mysql.connector.IntegrityError) -> str:
    if error.errno == ER_DUP_ENTRY:
        return "El registro ya existe"
    if error.errno == ER_NO_REFERENCED_ROW:
        return "El registro referenciado no existe"
    return "Conflicto de integridad de datos"


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '18:00:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
