from __future__ import annotations

from typing import Optional, Sequence

from ..api.client import ApiClient, map_rows
from ..api.session import SessionContext
from ..common.datetime_utils import parse_iso_datetime
from .model import EntryExit, EntryInput
from .repository import EntryRepository


def _to_entry(row: dict) -> EntryExit:
    student_id = row.get("alumno_id")
    registered = row.get("fecha_registro")
    return EntryExit(
        entry_id=int(row["id"]),
        visitor_name=row.get("nombre_visita") or "",
        reason=row.get("motivo") or "",
        direction=row.get("tipo") or "",
        student_id=int(student_id) if student_id else None,
        student_name=row.get("nombre_alumno") or "",
        registered_at=parse_iso_datetime(registered) if registered else None,
    )


class HttpEntryRepository(EntryRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_all(self, *, ctx: SessionContext) -> Sequence[EntryExit]:
        error = "Error al obtener entradas/salidas"
        return map_rows(self._client.get("/entradas-salidas", ctx=ctx, error=error), _to_entry, error=error)

    def create(self, *, ctx: SessionContext, data: EntryInput) -> Optional[int]:
        created = self._client.post(
            "/entradas-salidas", ctx=ctx, json=data.to_payload(), error="Error al crear entrada/salida"
        )
        if isinstance(created, dict) and created.get("id") is not None:
            return int(created["id"])
        return None

    def update(self, *, ctx: SessionContext, entry_id: int, data: EntryInput) -> None:
        self._client.put(
            f"/entradas-salidas/{int(entry_id)}",
            ctx=ctx,
            json=data.to_payload(),
            error="Error al actualizar entrada/salida",
        )

    def delete(self, *, ctx: SessionContext, entry_id: int) -> None:
        self._client.delete(f"/entradas-salidas/{int(entry_id)}", ctx=ctx, error="Error al eliminar entrada/salida")
