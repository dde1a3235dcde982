from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from ..api.session import SessionContext
from ..common.filters import Predicate, sort_by_id_desc, text_contains
from ..common.validators import parse_int, require_non_empty
from ..core.constants import GRADES, SECTION_ROLES, SHIFT_LETTERS
from ..core.enums import SchoolShift
from ..core.exceptions import AuthorizationError, RemoteServiceError, ValidationError
from .model import Student, StudentInput
from .repository import StudentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudentFilters:
    search: str = ""
    grade: str = ""
    letter: str = ""
    shift: str = ""

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "StudentFilters":
        return cls(
            search=(args.get("q") or "").strip(),
            grade=(args.get("grado") or "").strip(),
            letter=(args.get("grupo") or "").strip().upper(),
            shift=(args.get("turno") or "").strip(),
        )

    @property
    def targets_group(self) -> bool:
        """Group actions need both grade and letter selected."""
        return bool(self.grade and self.letter)

    def group_scope(self) -> "StudentFilters":
        """The whole grade+letter group, ignoring name search and shift."""
        return StudentFilters(grade=self.grade, letter=self.letter)

    def predicates(self) -> list[Predicate]:
        out: list[Predicate] = []
        if self.search:
            out.append(text_contains([lambda s: s.name], self.search))
        if self.grade:
            out.append(lambda s: s.grade == self.grade)
        if self.letter:
            out.append(lambda s: s.letter == self.letter)
        if self.shift:
            out.append(lambda s: s.shift == self.shift)
        return out


class StudentService:
    """Use case: student records, one by one or by whole group."""

    def __init__(self, students: StudentRepository):
        self._students = students

    @staticmethod
    def _require_access(ctx: SessionContext) -> None:
        if ctx.role not in SECTION_ROLES["students"]:
            raise AuthorizationError("No tienes permiso para gestionar alumnos")

    @staticmethod
    def _check_group(grade: str, letter: str, shift: str) -> str:
        try:
            shift = SchoolShift(shift).value
        except ValueError:
            raise ValidationError("Selecciona un turno", fields=("turno",))
        if grade not in GRADES:
            raise ValidationError("Selecciona un grado", fields=("grado",))
        letter = (letter or "").strip().upper()
        if letter not in SHIFT_LETTERS[shift]:
            raise ValidationError("La letra del grupo no corresponde al turno", fields=("grupo",))
        return grade + letter

    def build_input(self, *, name: str, grade: str, letter: str, shift: str, enrollment_year) -> StudentInput:
        name = require_non_empty(name, "Nombre", field="nombre")
        group = self._check_group((grade or "").strip(), letter, shift)
        year = parse_int(enrollment_year, "Año de ingreso", field="ingreso")
        return StudentInput(name=name, group=group, shift=shift, enrollment_year=year)

    def list_students(self, ctx: SessionContext) -> Sequence[Student]:
        self._require_access(ctx)
        return sort_by_id_desc(self._students.list_all(ctx=ctx))

    def picker(self, ctx: SessionContext) -> Sequence[Student]:
        """Students for the form pickers of other sections; empty on failure."""
        try:
            return sorted(self._students.list_all(ctx=ctx), key=lambda s: s.name)
        except RemoteServiceError as e:
            logger.warning("student picker unavailable: %s", e)
            return []

    def create_student(self, ctx: SessionContext, data: StudentInput) -> Optional[int]:
        self._require_access(ctx)
        return self._students.create(ctx=ctx, data=data)

    def update_student(self, ctx: SessionContext, student_id: int, data: StudentInput) -> None:
        self._require_access(ctx)
        self._students.update(ctx=ctx, student_id=int(student_id), data=data)

    def delete_student(self, ctx: SessionContext, student_id: int) -> None:
        self._require_access(ctx)
        self._students.delete(ctx=ctx, student_id=int(student_id))

    def bulk_create(
        self,
        ctx: SessionContext,
        *,
        grade: str,
        letter: str,
        shift: str,
        enrollment_year,
        names_text: str,
    ) -> int:
        """One student per non-blank line of ``names_text``."""
        self._require_access(ctx)
        names = [n.strip() for n in (names_text or "").splitlines() if n.strip()]
        if not names:
            raise ValidationError("Escribe al menos un nombre", fields=("nombres",))
        group = self._check_group((grade or "").strip(), letter, shift)
        year = parse_int(enrollment_year, "Año de ingreso", field="ingreso")
        batch = [StudentInput(name=n, group=group, shift=shift, enrollment_year=year) for n in names]
        self._students.bulk_create(ctx=ctx, students=batch)
        return len(batch)

    @staticmethod
    def excluded_ids(visible_ids: Sequence[int], selected_ids: Sequence[int]) -> list[int]:
        """Students shown under the group filter but left unticked."""
        selected = {int(i) for i in selected_ids}
        return [int(i) for i in visible_ids if int(i) not in selected]

    def bulk_update_group(
        self,
        ctx: SessionContext,
        *,
        filters: StudentFilters,
        visible_ids: Sequence[int],
        selected_ids: Sequence[int],
        new_grade: str = "",
        new_letter: str = "",
        new_year=None,
    ) -> None:
        self._require_access(ctx)
        if not filters.targets_group:
            raise ValidationError("Selecciona grado y grupo antes de editar el grupo", fields=("grado", "grupo"))

        new_group = None
        if new_grade and new_letter:
            new_group = new_grade.strip() + new_letter.strip().upper()
        year = parse_int(new_year, "Año de ingreso", field="ingreso") if new_year not in (None, "") else None
        if not new_group and not year:
            raise ValidationError("Indica el nuevo grupo o el nuevo año de ingreso")

        self._students.update_group(
            ctx=ctx,
            group=filters.grade + filters.letter,
            new_group=new_group,
            new_year=year,
            exclude_ids=self.excluded_ids(visible_ids, selected_ids),
        )

    def bulk_delete_group(
        self,
        ctx: SessionContext,
        *,
        filters: StudentFilters,
        visible_ids: Sequence[int],
        selected_ids: Sequence[int],
    ) -> None:
        self._require_access(ctx)
        if not filters.targets_group:
            raise ValidationError("Selecciona grado y grupo antes de eliminar el grupo", fields=("grado", "grupo"))
        if not selected_ids:
            raise ValidationError("No hay alumnos seleccionados")
        self._students.delete_group(
            ctx=ctx,
            grade=filters.grade,
            letter=filters.letter,
            exclude_ids=self.excluded_ids(visible_ids, selected_ids),
        )
