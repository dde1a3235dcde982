from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..api.session import SessionContext
from ..core.enums import Role
from .model import StaffProfile


class UserRepository(Protocol):
    """Repository interface for staff profiles.

    Services depend on this interface, not on the HTTP implementation.
    """

    def login(self, *, name: str, secret: str) -> SessionContext:
        raise NotImplementedError

    def list_all(self, *, ctx: SessionContext) -> Sequence[StaffProfile]:
        raise NotImplementedError

    def create(self, *, ctx: SessionContext, name: str, password: str, role: Role) -> Optional[int]:
        raise NotImplementedError

    def update(
        self,
        *,
        ctx: SessionContext,
        user_id: int,
        name: str,
        role: Role,
        password: Optional[str] = None,
    ) -> None:
        raise NotImplementedError

    def delete(self, *, ctx: SessionContext, user_id: int) -> None:
        raise NotImplementedError
