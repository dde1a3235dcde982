from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class EntryExit:
    """Registro de visita. ``registered_at`` lo asigna el servidor."""

    entry_id: int
    visitor_name: str
    reason: str
    direction: str
    student_id: Optional[int] = None
    student_name: str = ""
    registered_at: Optional[datetime] = None

    @property
    def id(self) -> int:
        return self.entry_id


@dataclass(frozen=True)
class EntryInput:
    visitor_name: str
    reason: str
    direction: str
    student_id: Optional[int] = None

    def to_payload(self) -> dict:
        return {
            "nombre_visita": self.visitor_name,
            "motivo": self.reason,
            "tipo": self.direction,
            "alumno_id": self.student_id,
        }
