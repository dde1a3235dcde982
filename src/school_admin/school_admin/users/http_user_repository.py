from __future__ import annotations

from typing import Optional, Sequence

from ..api.client import ApiClient, map_rows
from ..api.session import SessionContext
from ..core.enums import Role
from .model import StaffProfile
from .repository import UserRepository


def _to_profile(row: dict) -> StaffProfile:
    return StaffProfile(user_id=int(row["id"]), name=row.get("nombre") or "", role=Role.parse(row.get("rol") or ""))


class HttpUserRepository(UserRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def login(self, *, name: str, secret: str) -> SessionContext:
        payload = self._client.post(
            "/users/login",
            json={"nombre": name, "contraseña": secret},
            expected=(200,),
            error="Error en el login",
        )
        return SessionContext.from_login_response(payload or {})

    def list_all(self, *, ctx: SessionContext) -> Sequence[StaffProfile]:
        error = "Error al obtener usuarios"
        return map_rows(self._client.get("/users", ctx=ctx, error=error), _to_profile, error=error)

    def create(self, *, ctx: SessionContext, name: str, password: str, role: Role) -> Optional[int]:
        created = self._client.post(
            "/users",
            ctx=ctx,
            json={"nombre": name, "contraseña": password, "rol": role.value},
            error="Error al crear usuario",
        )
        if isinstance(created, dict) and created.get("id") is not None:
            return int(created["id"])
        return None

    def update(
        self,
        *,
        ctx: SessionContext,
        user_id: int,
        name: str,
        role: Role,
        password: Optional[str] = None,
    ) -> None:
        body = {"nombre": name, "rol": role.value}
        if password:
            body["contraseña"] = password
        self._client.put(f"/users/{int(user_id)}", ctx=ctx, json=body, error="Error al actualizar usuario")

    def delete(self, *, ctx: SessionContext, user_id: int) -> None:
        self._client.delete(f"/users/{int(user_id)}", ctx=ctx, error="Error al eliminar usuario")
