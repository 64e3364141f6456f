from __future__ import annotations

from typing import Any, Optional

from ..core.constants import MAX_DB_ID
from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} es requerido")
    return value.strip()


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} debe tener al menos {min_len} caracteres")
    return value


def require_email(value: Any) -> str:
    email = require_non_empty(value, "email").lower()
    local, _, domain = email.partition("@")
    if not local or not domain or " " in email:
        raise ValidationError("email no es válido")
    return email


def require_id(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} no es válido")
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} no es válido")
    if ident <= 0 or ident > MAX_DB_ID:
        raise ValidationError(f"{field_name} no es válido")
    return ident


def parse_flag(value: Any, field_name: str) -> bool:
    """Accept JSON booleans as well as the usual query-string spellings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "si", "sí"}:
            return True
        if lowered in {"0", "false", "no"}:
            return False
    raise ValidationError(f"{field_name} debe ser verdadero o falso")
