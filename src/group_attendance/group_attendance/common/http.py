from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Any, Callable, Optional

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import AuthError, DomainError, ValidationError
from .datetime_utils import parse_iso_date
from .logging_utils import get_logger
from .validators import parse_flag, require_id

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"


def bearer_token() -> str:
    """Extract the token from `Authorization: Bearer <token>`."""
    header = request.headers.get("Authorization", "")
    if not header:
        raise AuthError("No se proporcionó token")

    parts = header.split()
    if len(parts) != 2:
        raise AuthError("Token mal formado")

    scheme, token = parts
    if scheme.lower() != "bearer":
        raise AuthError("Token mal formado")
    return token


def make_token_required(resolve: Callable[[str], int]):
    """Build the decorator guarding protected routes.

    `resolve` turns a raw token into a person id or raises AuthError.
    """

    def token_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.person_id = resolve(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    return token_required


def json_body() -> Any:
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError("El cuerpo de la petición está vacío o no es un JSON válido")
    return data


def json_object() -> dict:
    data = json_body()
    if not isinstance(data, dict):
        raise ValidationError("Se esperaba un objeto JSON")
    return data


def query_id(*names: str) -> Optional[int]:
    """First non-empty query parameter among `names`, parsed as an id."""
    for name in names:
        value = request.args.get(name)
        if value not in (None, ""):
            return require_id(value, name)
    return None


def query_flag(*names: str) -> Optional[bool]:
    for name in names:
        value = request.args.get(name)
        if value not in (None, ""):
            return parse_flag(value, name)
    return None


def query_date(*names: str) -> Optional[date]:
    for name in names:
        value = request.args.get(name)
        if value not in (None, ""):
            return parse_iso_date(value, name)
    return None


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.status_code >= 500:
            logger.error("Domain error escalated to %s: %s", e.status_code, e)
            return jsonify({"error": INTERNAL_ERROR_MESSAGE}), e.status_code
        return jsonify({"error": str(e)}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # Internal details are logged, never returned.
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": INTERNAL_ERROR_MESSAGE}), 500
