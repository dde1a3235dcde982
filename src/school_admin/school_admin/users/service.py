from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping, Optional, Sequence

from ..api import session as session_store
from ..api.session import SessionContext
from ..common.filters import Predicate, field_equals, sort_by_id_desc, text_contains
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import StaffProfile
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: login / restore / logout."""

    def __init__(self, users: UserRepository):
        self._users = users

    def login(self, name: str, secret: str) -> SessionContext:
        if not (name or "").strip() or not secret:
            raise ValidationError("Por favor, completa todos los campos.", fields=("nombre", "contrasena"))
        ctx = self._users.login(name=name.strip(), secret=secret)
        logger.info("login ok user_id=%s role=%s", ctx.user_id, ctx.role.value)
        return ctx

    @staticmethod
    def restore(store: Mapping[str, Any]) -> Optional[SessionContext]:
        return SessionContext.from_mapping(store)

    @staticmethod
    def start(store: MutableMapping[str, Any], ctx: SessionContext) -> None:
        session_store.persist(store, ctx)

    @staticmethod
    def logout(store: MutableMapping[str, Any]) -> None:
        session_store.clear(store)


@dataclass(frozen=True)
class UserFilters:
    search: str = ""
    role: Optional[Role] = None

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "UserFilters":
        role = None
        if args.get("rol"):
            try:
                role = Role.parse(args["rol"])
            except ValueError:
                role = None
        return cls(search=(args.get("q") or "").strip(), role=role)

    def predicates(self) -> list[Predicate]:
        out: list[Predicate] = []
        if self.search:
            out.append(text_contains([lambda u: u.name], self.search))
        if self.role:
            out.append(field_equals(lambda u: u.role, self.role))
        return out


class UserService:
    """Use case: manage staff profiles (Dirección only)."""

    def __init__(self, users: UserRepository):
        self._users = users

    @staticmethod
    def _require_direccion(ctx: SessionContext) -> None:
        if ctx.role != Role.DIRECCION:
            raise AuthorizationError("No tienes permiso para gestionar perfiles")

    @staticmethod
    def _parse_role(value) -> Role:
        if isinstance(value, Role):
            return value
        try:
            return Role.parse(value)
        except ValueError:
            raise ValidationError("Rol no válido", fields=("rol",))

    def list_profiles(self, ctx: SessionContext) -> Sequence[StaffProfile]:
        self._require_direccion(ctx)
        return sort_by_id_desc(self._users.list_all(ctx=ctx))

    def create_profile(self, ctx: SessionContext, *, name: str, password: str, role) -> Optional[int]:
        self._require_direccion(ctx)
        name = require_non_empty(name, "Nombre", field="nombre")
        require_non_empty(password, "Contraseña", field="password")
        return self._users.create(ctx=ctx, name=name, password=password, role=self._parse_role(role))

    def update_profile(self, ctx: SessionContext, user_id: int, *, name: str, role, password: str = "") -> None:
        """Blank password keeps the current one; the old value is never shown."""
        self._require_direccion(ctx)
        name = require_non_empty(name, "Nombre", field="nombre")
        new_password = password if password and password.strip() else None
        self._users.update(
            ctx=ctx,
            user_id=int(user_id),
            name=name,
            role=self._parse_role(role),
            password=new_password,
        )

    def delete_profile(self, ctx: SessionContext, user_id: int) -> None:
        self._require_direccion(ctx)
        self._users.delete(ctx=ctx, user_id=int(user_id))
