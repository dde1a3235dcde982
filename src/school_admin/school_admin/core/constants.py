from __future__ import annotations

from .enums import Role

REASON_MAX_LENGTH = 35

# Dirección only justifies absences of at least this many business days.
MIN_DAYS_BY_ROLE = {Role.DIRECCION: 4}

# Menu sections visible per role. Justifications are open to everybody.
SECTION_ROLES = {
    "users": {Role.DIRECCION},
    "students": {Role.DIRECCION, Role.TRABAJO_SOCIAL},
    "entries": {Role.DIRECCION, Role.PREFECTO, Role.TRABAJO_SOCIAL, Role.MAESTRO},
    "justifications": set(Role),
}

OVERLAP_MESSAGE = "El alumno ya tiene un justificante que abarca parte o todo ese periodo."
OVERLAP_SERVER_MARKER = "abarca parte o todo ese periodo"

GRADES = ("1", "2", "3")

# Group letters depend on the shift: morning A-F, afternoon G-L.
SHIFT_LETTERS = {
    "Matutino": tuple("ABCDEF"),
    "Vespertino": tuple("GHIJKL"),
}
