from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..api.session import SessionContext
from .model import Justification


class JustificationRepository(Protocol):
    def list_all(self, *, ctx: SessionContext) -> Sequence[Justification]:
        raise NotImplementedError

    def create(self, *, ctx: SessionContext, payload: dict) -> Optional[int]:
        raise NotImplementedError

    def update(self, *, ctx: SessionContext, justification_id: int, payload: dict) -> None:
        raise NotImplementedError

    def delete(self, *, ctx: SessionContext, justification_id: int) -> None:
        raise NotImplementedError
