from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.logging_utils import get_logger
from ..common.validators import (
    optional_text,
    parse_flag,
    require_email,
    require_min_length,
    require_non_empty,
)
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import AuthError, ConflictError, ForbiddenError, NotFoundError, ValidationError
from .model import Person
from .repository import PersonRepository
from .tokens import TokenCodec

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Credenciales inválidas"


@dataclass(frozen=True)
class LoginResult:
    """What the login/register endpoints hand back to the client."""

    token: str
    person: Person

    def to_dict(self) -> dict:
        return {"token": self.token, "person": self.person.to_dict()}


@dataclass(frozen=True)
class _PersonFields:
    first_name: str
    first_surname: str
    second_surname: Optional[str]
    national_id: Optional[str]
    email: str
    phone: Optional[str]
    job_title: Optional[str]
    notes: Optional[str]
    is_active: bool


def _parse_person_fields(payload: Mapping[str, Any], *, default_active: bool = True) -> _PersonFields:
    missing = [f for f in ("nombre", "primer_apellido", "email") if not optional_text(payload.get(f))]
    if missing:
        raise ValidationError("Nombre, primer apellido y email son campos requeridos")

    is_active = default_active
    if payload.get("activo") is not None:
        is_active = parse_flag(payload.get("activo"), "activo")

    return _PersonFields(
        first_name=require_non_empty(payload.get("nombre"), "nombre"),
        first_surname=require_non_empty(payload.get("primer_apellido"), "primer_apellido"),
        second_surname=optional_text(payload.get("segundo_apellido")),
        national_id=optional_text(payload.get("dni")),
        email=require_email(payload.get("email")),
        phone=optional_text(payload.get("telefono")),
        job_title=optional_text(payload.get("puesto_trabajo")),
        notes=optional_text(payload.get("observaciones")),
        is_active=is_active,
    )


def _hash_optional_password(payload: Mapping[str, Any]) -> Optional[str]:
    password = payload.get("password")
    if password is None or password == "":
        return None
    if not isinstance(password, str):
        raise ValidationError("password no es válido")
    require_min_length(password, "password", MIN_PASSWORD_LENGTH)
    return generate_password_hash(password)


class PersonService:
    """Use case: manage persons (CRUD)."""

    def __init__(self, persons: PersonRepository):
        self._persons = persons

    def list_persons(self) -> Sequence[Person]:
        return self._persons.list_all()

    def get_person(self, person_id: int) -> Person:
        person = self._persons.get_by_id(int(person_id))
        if not person:
            raise NotFoundError("Usuario no encontrado")
        return person

    def create_person(self, payload: Mapping[str, Any], *, is_admin: bool = False) -> Person:
        fields = _parse_person_fields(payload)
        password_hash = _hash_optional_password(payload)

        if self._persons.get_by_email(fields.email):
            raise ConflictError("Ya existe una persona con ese email")

        person_id = self._persons.create_person(
            first_name=fields.first_name,
            first_surname=fields.first_surname,
            second_surname=fields.second_surname,
            national_id=fields.national_id,
            email=fields.email,
            phone=fields.phone,
            job_title=fields.job_title,
            notes=fields.notes,
            password_hash=password_hash,
            is_admin=is_admin,
            is_active=fields.is_active,
        )
        logger.info("Person created id=%s admin=%s", person_id, is_admin)
        return self.get_person(person_id)

    def create_admin(self, *, caller_id: int, payload: Mapping[str, Any]) -> Person:
        caller = self._persons.get_by_id(int(caller_id))
        if not caller or not caller.is_admin:
            raise ForbiddenError("No tienes permisos para crear administradores")
        if not payload.get("password"):
            raise ValidationError("password es requerido")
        return self.create_person(payload, is_admin=True)

    def update_person(self, person_id: int, payload: Mapping[str, Any]) -> Person:
        current = self.get_person(person_id)
        fields = _parse_person_fields(payload, default_active=current.is_active)
        password_hash = _hash_optional_password(payload)

        other = self._persons.get_by_email(fields.email)
        if other and other.person_id != current.person_id:
            raise ConflictError("Ya existe una persona con ese email")

        if not self._persons.update_person(
            current.person_id,
            first_name=fields.first_name,
            first_surname=fields.first_surname,
            second_surname=fields.second_surname,
            national_id=fields.national_id,
            email=fields.email,
            phone=fields.phone,
            job_title=fields.job_title,
            notes=fields.notes,
            is_active=fields.is_active,
        ):
            raise NotFoundError("Usuario no encontrado")

        if password_hash:
            self._persons.set_password_hash(current.person_id, password_hash)

        return self.get_person(current.person_id)

    def delete_person(self, person_id: int) -> None:
        person = self.get_person(person_id)
        if person.is_admin:
            raise ForbiddenError("No se puede eliminar a un administrador")

        if not self._persons.delete_by_id(person.person_id):
            raise NotFoundError("Usuario no encontrado")
        logger.info("Person deleted id=%s", person.person_id)


class AuthService:
    """Use case: authenticate a person (login) and resolve bearer tokens."""

    def __init__(self, persons: PersonRepository, tokens: TokenCodec, people: PersonService):
        self._persons = persons
        self._tokens = tokens
        self._people = people

    def login(self, email: Any, password: Any) -> LoginResult:
        if not isinstance(email, str) or not email.strip() or not isinstance(password, str) or not password:
            raise ValidationError("Email y contraseña son requeridos")

        person = self._persons.get_by_email(email.strip().lower())
        if not person or not person.is_active or not person.password_hash:
            logger.warning("Login rejected for %s", email)
            raise AuthError(INVALID_CREDENTIALS)

        try:
            ok = check_password_hash(person.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.warning("Login rejected for %s", email)
            raise AuthError(INVALID_CREDENTIALS)

        return LoginResult(token=self._tokens.issue(person.person_id), person=person)

    def register(self, payload: Mapping[str, Any]) -> LoginResult:
        if not payload.get("password"):
            raise ValidationError("password es requerido")
        person = self._people.create_person(payload, is_admin=False)
        return LoginResult(token=self._tokens.issue(person.person_id), person=person)

    def resolve_token(self, token: str) -> int:
        return self._tokens.decode(token)

    def current_person(self, person_id: int) -> Person:
        person = self._persons.get_by_id(int(person_id))
        if not person or not person.is_active:
            raise AuthError("Usuario no válido")
        return person
