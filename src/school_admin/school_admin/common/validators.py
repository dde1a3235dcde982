from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str, *, field: str = "") -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} es obligatorio", fields=(field,) if field else ())
    return value.strip()


def require_max_length(value: Optional[str], field_name: str, max_len: int, *, field: str = "") -> str:
    if value is not None and len(value) > max_len:
        raise ValidationError(
            f"{field_name} no puede superar {max_len} caracteres",
            fields=(field,) if field else (),
        )
    return value or ""


def parse_int(value, field_name: str, *, field: str = "") -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} no es válido", fields=(field,) if field else ())
