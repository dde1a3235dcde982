from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Rol del personal; decide el menú y los permisos."""

    MAESTRO = "Maestro"
    PREFECTO = "Prefecto"
    DIRECCION = "Direccion"
    TRABAJO_SOCIAL = "Trabajo Social"
    ENFERMERIA = "Enfermeria"

    @classmethod
    def parse(cls, value: str) -> "Role":
        """Accept the lower-case spelling the API returns (e.g. "trabajo social")."""
        v = (value or "").strip().lower()
        for role in cls:
            if role.value.lower() == v:
                return role
        raise ValueError(f"Unknown role: {value!r}")

    @property
    def department(self) -> str:
        return _DEPARTMENTS[self]


_DEPARTMENTS = {
    Role.PREFECTO: "Prefectura",
    Role.MAESTRO: "Maestros",
    Role.ENFERMERIA: "Enfermeria",
    Role.DIRECCION: "Direccion",
    Role.TRABAJO_SOCIAL: "Trabajo Social",
}


class Direction(str, Enum):
    """Sentido de un registro de entrada/salida."""

    ENTRADA = "Entrada"
    SALIDA = "Salida"


class SchoolShift(str, Enum):
    MATUTINO = "Matutino"
    VESPERTINO = "Vespertino"


class JustificationType(str, Enum):
    ENFERMEDAD = "Enfermedad"
    FAMILIAR = "Familiar"
    ESCOLAR = "Escolar"
    OTROS = "Otros"


class DatePreset(str, Enum):
    """Filtros rápidos de fecha; se evalúan contra el reloj en cada pasada."""

    TODAY = "hoy"
    YESTERDAY = "ayer"
    WEEK = "semana"
    MONTH = "mes"
    YEAR = "año"


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"
