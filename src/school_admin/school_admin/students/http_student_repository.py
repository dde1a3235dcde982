from __future__ import annotations

from typing import Optional, Sequence

from ..api.client import ApiClient, map_rows
from ..api.session import SessionContext
from .model import Student, StudentInput
from .repository import StudentRepository


def _to_student(row: dict) -> Student:
    year = row.get("ingreso")
    return Student(
        student_id=int(row["id"]),
        name=row.get("nombre") or "",
        group=row.get("grupo") or "",
        shift=row.get("turno") or "",
        enrollment_year=int(year) if year not in (None, "") else None,
    )


class HttpStudentRepository(StudentRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_all(self, *, ctx: SessionContext) -> Sequence[Student]:
        error = "Error al obtener alumnos"
        return map_rows(self._client.get("/alumnos", ctx=ctx, error=error), _to_student, error=error)

    def create(self, *, ctx: SessionContext, data: StudentInput) -> Optional[int]:
        created = self._client.post("/alumnos", ctx=ctx, json=data.to_payload(), error="Error al crear alumno")
        if isinstance(created, dict) and created.get("id") is not None:
            return int(created["id"])
        return None

    def update(self, *, ctx: SessionContext, student_id: int, data: StudentInput) -> None:
        self._client.put(
            f"/alumnos/{int(student_id)}", ctx=ctx, json=data.to_payload(), error="Error al actualizar alumno"
        )

    def delete(self, *, ctx: SessionContext, student_id: int) -> None:
        self._client.delete(f"/alumnos/{int(student_id)}", ctx=ctx, error="Error al eliminar alumno")

    def bulk_create(self, *, ctx: SessionContext, students: Sequence[StudentInput]) -> None:
        self._client.post(
            "/alumnos/bulk",
            ctx=ctx,
            json={"alumnos": [s.to_payload() for s in students]},
            error="Error en alta masiva",
        )

    def update_group(
        self,
        *,
        ctx: SessionContext,
        group: str,
        new_group: Optional[str],
        new_year: Optional[int],
        exclude_ids: Sequence[int],
    ) -> None:
        body: dict = {"grupo": group}
        if new_group:
            body["nuevoGrupo"] = new_group
        if new_year:
            body["nuevoIngreso"] = int(new_year)
        if exclude_ids:
            body["excluirIds"] = [int(i) for i in exclude_ids]
        self._client.put("/alumnos/grupo", ctx=ctx, json=body, error="Error al editar el grupo")

    def delete_group(self, *, ctx: SessionContext, grade: str, letter: str, exclude_ids: Sequence[int]) -> None:
        self._client.delete(
            "/alumnos/grupo",
            ctx=ctx,
            json={"grado": grade, "grupo": letter, "excluirIds": [int(i) for i in exclude_ids]},
            error="Error al eliminar el grupo de alumnos",
        )
