from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_timestamp


@dataclass(frozen=True)
class Person:
    """Domain entity: a person who can belong to groups and attend meetings.

    Note: Plain data object, no DB access here.
    """

    person_id: int
    first_name: str
    first_surname: str
    email: str
    second_surname: Optional[str] = None
    national_id: Optional[str] = None
    phone: Optional[str] = None
    job_title: Optional[str] = None
    notes: Optional[str] = None
    password_hash: Optional[str] = None
    is_admin: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return display_name(self.first_name, self.first_surname, self.second_surname)

    def to_dict(self) -> dict:
        # password_hash is never serialized
        return {
            "id": self.person_id,
            "nombre": self.first_name,
            "primer_apellido": self.first_surname,
            "segundo_apellido": self.second_surname,
            "dni": self.national_id,
            "email": self.email,
            "telefono": self.phone,
            "puesto_trabajo": self.job_title,
            "observaciones": self.notes,
            "es_admin": self.is_admin,
            "activo": self.is_active,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }


def display_name(first_name: str, first_surname: str, second_surname: Optional[str] = None) -> str:
    parts = [first_name, first_surname, second_surname]
    return " ".join(p.strip() for p in parts if p and p.strip())
