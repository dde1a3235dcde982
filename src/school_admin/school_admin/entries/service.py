from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional, Sequence

from ..api.session import SessionContext
from ..common.datetime_utils import parse_iso_date
from ..common.filters import (
    Predicate,
    date_between,
    date_preset,
    field_equals,
    hour_equals,
    same_day,
    sort_by_id_desc,
    text_contains,
)
from ..common.validators import require_max_length, require_non_empty
from ..core.constants import REASON_MAX_LENGTH, SECTION_ROLES
from ..core.enums import DatePreset, Direction
from ..core.exceptions import AuthorizationError, ValidationError
from .model import EntryExit, EntryInput
from .repository import EntryRepository


def _opt_date(value: Optional[str]) -> Optional[date]:
    try:
        return parse_iso_date(value) if value else None
    except ValueError:
        return None


def _registered_at(entry: EntryExit):
    return entry.registered_at


@dataclass(frozen=True)
class EntryFilters:
    search: str = ""
    students_only: bool = False
    preset: Optional[DatePreset] = None
    range_start: Optional[date] = None
    range_end: Optional[date] = None
    day: Optional[date] = None
    direction: str = ""
    hour: Optional[int] = None

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "EntryFilters":
        preset = None
        if args.get("fecha"):
            try:
                preset = DatePreset(args["fecha"])
            except ValueError:
                preset = None
        raw_hour = (args.get("hora") or "").strip()
        return cls(
            search=(args.get("q") or "").strip(),
            students_only=args.get("alumnos") in ("1", "on", "true"),
            preset=preset,
            range_start=_opt_date(args.get("desde")),
            range_end=_opt_date(args.get("hasta")),
            day=_opt_date(args.get("dia")),
            direction=(args.get("tipo") or "").strip(),
            hour=int(raw_hour) if raw_hour.isdigit() else None,
        )

    def predicates(self) -> list[Predicate]:
        out: list[Predicate] = []
        if self.students_only:
            out.append(lambda e: bool(e.student_id))
        if self.search:
            out.append(text_contains([lambda e: e.visitor_name, lambda e: e.student_name], self.search))
        if self.preset:
            out.append(date_preset(_registered_at, self.preset))
        if self.range_start and self.range_end:
            out.append(date_between(_registered_at, self.range_start, self.range_end))
        if self.day:
            out.append(same_day(_registered_at, self.day))
        if self.direction:
            out.append(field_equals(lambda e: e.direction, self.direction))
        if self.hour is not None:
            out.append(hour_equals(_registered_at, self.hour))
        return out


class EntryService:
    """Use case: visitor entry/exit log."""

    def __init__(self, entries: EntryRepository):
        self._entries = entries

    @staticmethod
    def _require_access(ctx: SessionContext) -> None:
        if ctx.role not in SECTION_ROLES["entries"]:
            raise AuthorizationError("No tienes permiso para registrar entradas y salidas")

    @staticmethod
    def build_input(*, visitor_name: str, reason: str, direction: str, student_id=None) -> EntryInput:
        visitor_name = require_non_empty(visitor_name, "Nombre de la visita", field="nombre_visita")
        reason = require_non_empty(reason, "Motivo", field="motivo")
        require_max_length(reason, "Motivo", REASON_MAX_LENGTH, field="motivo")
        try:
            direction = Direction(direction).value
        except ValueError:
            raise ValidationError("Tipo debe ser Entrada o Salida", fields=("tipo",))

        sid = None
        if student_id not in (None, ""):
            raw = str(student_id).strip()
            if not raw.isdigit():
                raise ValidationError("Alumno no válido", fields=("alumno_id",))
            sid = int(raw) or None
        return EntryInput(visitor_name=visitor_name, reason=reason, direction=direction, student_id=sid)

    def list_entries(self, ctx: SessionContext) -> Sequence[EntryExit]:
        self._require_access(ctx)
        return sort_by_id_desc(self._entries.list_all(ctx=ctx))

    def create(self, ctx: SessionContext, data: EntryInput) -> Optional[int]:
        self._require_access(ctx)
        return self._entries.create(ctx=ctx, data=data)

    def update(self, ctx: SessionContext, entry_id: int, data: EntryInput) -> None:
        self._require_access(ctx)
        self._entries.update(ctx=ctx, entry_id=int(entry_id), data=data)

    def delete(self, ctx: SessionContext, entry_id: int) -> None:
        self._require_access(ctx)
        self._entries.delete(ctx=ctx, entry_id=int(entry_id))
