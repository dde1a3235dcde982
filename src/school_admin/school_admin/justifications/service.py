from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..api.session import SessionContext
from ..common.datetime_utils import DateLike, business_days, parse_iso_date
from ..common.filters import Predicate, date_preset, field_equals, sort_by_id_desc, text_contains
from ..common.validators import require_non_empty
from ..core.constants import MIN_DAYS_BY_ROLE, OVERLAP_MESSAGE, OVERLAP_SERVER_MARKER
from ..core.enums import DatePreset, JustificationType
from ..core.exceptions import RemoteServiceError, ValidationError
from .model import DateSpan, Justification, JustificationDraft
from .overlap import has_overlap
from .repository import JustificationRepository

logger = logging.getLogger(__name__)

DATE_FIELDS = ("fecha_inicio", "fecha_regreso")


@dataclass(frozen=True)
class JustificationFilters:
    search: str = ""
    kind: str = ""
    department: str = ""
    grade: str = ""
    letter: str = ""
    preset: Optional[DatePreset] = None
    mine: bool = False

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "JustificationFilters":
        preset = None
        if args.get("fecha"):
            try:
                preset = DatePreset(args["fecha"])
            except ValueError:
                preset = None
        return cls(
            search=(args.get("q") or "").strip(),
            kind=(args.get("tipo") or "").strip(),
            department=(args.get("departamento") or "").strip(),
            grade=(args.get("grado") or "").strip(),
            letter=(args.get("grupo") or "").strip().upper(),
            preset=preset,
            mine=args.get("mios") in ("1", "on", "true"),
        )

    def is_active(self) -> bool:
        return bool(self.search or self.kind or self.department or self.grade or self.letter or self.preset or self.mine)

    def describe(self) -> list[str]:
        """Human readable list for report headers."""
        out: list[str] = []
        if self.search:
            out.append(f"Nombre: {self.search}")
        if self.kind:
            out.append(f"Tipo: {self.kind}")
        if self.department:
            out.append(f"Departamento: {self.department}")
        if self.grade:
            out.append(f"Grado: {self.grade}")
        if self.letter:
            out.append(f"Grupo: {self.letter}")
        if self.preset:
            out.append(f"Fecha: {self.preset.value.capitalize()}")
        if self.mine:
            out.append("Creado por mí")
        return out

    def predicates(self, ctx: Optional[SessionContext] = None) -> list[Predicate]:
        out: list[Predicate] = []
        if self.search:
            out.append(text_contains([lambda j: j.student_name], self.search))
        if self.kind:
            out.append(field_equals(lambda j: j.kind, self.kind))
        if self.department:
            out.append(field_equals(lambda j: j.department, self.department))
        if self.grade:
            out.append(lambda j: bool(j.group) and j.group[0] == self.grade)
        if self.letter:
            out.append(lambda j: "".join(ch for ch in j.group if ch.isalpha()).upper() == self.letter)
        if self.preset:
            out.append(date_preset(lambda j: j.start_date, self.preset))
        if self.mine and ctx is not None:
            out.append(field_equals(lambda j: j.created_by, ctx.user_id))
        return out


def draft_from_form(form: Mapping[str, str]) -> JustificationDraft:
    """Parse raw form values; unparsable dates become None (reported later)."""

    def _date(key: str) -> Optional[date]:
        raw = (form.get(key) or "").strip()
        if not raw:
            return None
        try:
            return parse_iso_date(raw)
        except ValueError:
            return None

    raw_student = (form.get("alumno_id") or "").strip()
    return JustificationDraft(
        kind=(form.get("tipo_justificante") or "").strip(),
        student_id=int(raw_student) if raw_student.isdigit() else None,
        tutor=(form.get("tutor") or "").strip(),
        reason=(form.get("motivo") or "").strip(),
        start_date=_date("fecha_inicio"),
        return_date=_date("fecha_regreso"),
        group=(form.get("grupo") or "").strip(),
    )


class JustificationService:
    """Use case: absence justifications.

    All checks here run before the REST call and are a convenience for the
    user; the service behind the API validates again.
    """

    def __init__(self, justifications: JustificationRepository):
        self._justifications = justifications

    @staticmethod
    def compute_duration(start: Optional[DateLike], end: Optional[DateLike]) -> Optional[int]:
        return business_days(start, end)

    def list_justifications(self, ctx: SessionContext) -> Sequence[Justification]:
        return sort_by_id_desc(self._justifications.list_all(ctx=ctx))

    def validate(
        self,
        ctx: SessionContext,
        draft: JustificationDraft,
        existing: Iterable[Justification],
        *,
        editing_id: Optional[int] = None,
    ) -> int:
        """Return the business-day duration or raise ValidationError."""
        if draft.student_id is None:
            raise ValidationError("Selecciona un alumno", fields=("alumno_id",))
        try:
            JustificationType(draft.kind)
        except ValueError:
            raise ValidationError("Selecciona el tipo de justificante", fields=("tipo_justificante",))
        require_non_empty(draft.tutor, "Tutor", field="tutor")
        require_non_empty(draft.reason, "Motivo", field="motivo")
        if draft.start_date is None or draft.return_date is None:
            raise ValidationError("Indica la fecha de inicio y la de regreso", fields=DATE_FIELDS)

        if draft.return_date < draft.start_date:
            raise ValidationError("La fecha de regreso no puede ser anterior a la de inicio.", fields=("fecha_regreso",))
        if draft.return_date == draft.start_date:
            raise ValidationError("La fecha de regreso no puede ser igual a la de inicio.", fields=("fecha_regreso",))

        days = self.compute_duration(draft.start_date, draft.return_date)
        if days is None:
            raise ValidationError("Rango de fechas no válido", fields=DATE_FIELDS)

        min_days = MIN_DAYS_BY_ROLE.get(ctx.role)
        if min_days is not None and days < min_days:
            raise ValidationError(
                "Dirección solo puede justificar a partir de cuatro días (mínimo 4)",
                fields=DATE_FIELDS,
            )

        candidate = DateSpan(student_id=draft.student_id, start=draft.start_date, end=draft.return_date)
        if has_overlap(candidate, existing, ignore_id=editing_id):
            raise ValidationError(OVERLAP_MESSAGE, fields=DATE_FIELDS)
        return days

    @staticmethod
    def build_payload(ctx: SessionContext, draft: JustificationDraft, days: int) -> dict:
        return {
            "tipo_justificante": draft.kind,
            "departamento": ctx.role.department,
            "alumno_id": int(draft.student_id),
            "grupo": draft.group,
            "tutor": draft.tutor,
            "motivo": draft.reason,
            "fecha_inicio": draft.start_date.isoformat(),
            "fecha_regreso": draft.return_date.isoformat(),
            "tiempo_dias": int(days),
        }

    @staticmethod
    def _raise_if_overlap(e: RemoteServiceError) -> None:
        if OVERLAP_SERVER_MARKER in str(e):
            logger.info("overlap rejected by server (status=%s)", e.status)
            raise ValidationError(OVERLAP_MESSAGE, fields=DATE_FIELDS) from e

    def create(self, ctx: SessionContext, draft: JustificationDraft, existing: Iterable[Justification]) -> Optional[int]:
        days = self.validate(ctx, draft, existing)
        try:
            return self._justifications.create(ctx=ctx, payload=self.build_payload(ctx, draft, days))
        except RemoteServiceError as e:
            self._raise_if_overlap(e)
            raise

    def update(
        self,
        ctx: SessionContext,
        justification_id: int,
        draft: JustificationDraft,
        existing: Iterable[Justification],
    ) -> None:
        days = self.validate(ctx, draft, existing, editing_id=int(justification_id))
        try:
            self._justifications.update(
                ctx=ctx,
                justification_id=int(justification_id),
                payload=self.build_payload(ctx, draft, days),
            )
        except RemoteServiceError as e:
            self._raise_if_overlap(e)
            raise

    def delete(self, ctx: SessionContext, justification_id: int) -> None:
        self._justifications.delete(ctx=ctx, justification_id=int(justification_id))

    @staticmethod
    def monthly_counts(items: Iterable[Justification]) -> dict[int, int]:
        """Justifications this month per student, as reported by the API."""
        counts: dict[int, int] = {}
        for j in items:
            counts.setdefault(j.student_id, j.monthly_total)
        return counts
