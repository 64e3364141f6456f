"""Create (or reset) an administrator account.

Usage: python scripts/create_admin.py EMAIL PASSWORD [NOMBRE] [PRIMER_APELLIDO]
"""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.group_attendance.group_attendance.core.constants import MIN_PASSWORD_LENGTH
from src.group_attendance.group_attendance.database.bootstrap import ensure_admin
from src.group_attendance.group_attendance.database.connection import DBConfig, DatabaseConnection


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(__doc__.strip())
        return 2

    email, password = argv[0], argv[1]
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"ERROR: password must have at least {MIN_PASSWORD_LENGTH} characters")
        return 2

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_dict(dict(settings.DB_CONFIG)))

    person_id = ensure_admin(
        conn,
        email=email,
        password=password,
        first_name=argv[2] if len(argv) > 2 else "Admin",
        first_surname=argv[3] if len(argv) > 3 else "User",
    )
    print(f"OK: administrator {email} ready (id={person_id})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
