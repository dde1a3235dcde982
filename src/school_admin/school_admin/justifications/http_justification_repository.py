from __future__ import annotations

from typing import Optional, Sequence

from ..api.client import ApiClient, map_rows
from ..api.session import SessionContext
from ..common.datetime_utils import parse_iso_date
from .model import Justification
from .repository import JustificationRepository


def _to_justification(row: dict) -> Justification:
    created_by = row.get("creado_por")
    return Justification(
        justification_id=int(row["id"]),
        kind=row.get("tipo_justificante") or "",
        department=row.get("departamento") or "",
        student_id=int(row["alumno_id"]),
        student_name=row.get("nombre_alumno") or "",
        group=row.get("grupo_alumno") or "",
        tutor=row.get("tutor") or "",
        reason=row.get("motivo") or "",
        start_date=parse_iso_date(row["fecha_inicio"]),
        return_date=parse_iso_date(row["fecha_regreso"]),
        duration_days=int(row.get("tiempo_dias") or 0),
        monthly_total=int(row.get("total_justificantes") or 0),
        created_by=int(created_by) if created_by is not None else None,
    )


class HttpJustificationRepository(JustificationRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_all(self, *, ctx: SessionContext) -> Sequence[Justification]:
        error = "Error al obtener justificantes"
        return map_rows(self._client.get("/justificantes", ctx=ctx, error=error), _to_justification, error=error)

    def create(self, *, ctx: SessionContext, payload: dict) -> Optional[int]:
        created = self._client.post("/justificantes", ctx=ctx, json=payload, error="Error al crear justificante")
        if isinstance(created, dict) and created.get("id") is not None:
            return int(created["id"])
        return None

    def update(self, *, ctx: SessionContext, justification_id: int, payload: dict) -> None:
        self._client.put(
            f"/justificantes/{int(justification_id)}",
            ctx=ctx,
            json=payload,
            error="Error al actualizar justificante",
        )

    def delete(self, *, ctx: SessionContext, justification_id: int) -> None:
        self._client.delete(
            f"/justificantes/{int(justification_id)}", ctx=ctx, error="Error al eliminar justificante"
        )
