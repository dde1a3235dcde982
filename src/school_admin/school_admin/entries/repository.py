from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..api.session import SessionContext
from .model import EntryExit, EntryInput


class EntryRepository(Protocol):
    def list_all(self, *, ctx: SessionContext) -> Sequence[EntryExit]:
        raise NotImplementedError

    def create(self, *, ctx: SessionContext, data: EntryInput) -> Optional[int]:
        raise NotImplementedError

    def update(self, *, ctx: SessionContext, entry_id: int, data: EntryInput) -> None:
        raise NotImplementedError

    def delete(self, *, ctx: SessionContext, entry_id: int) -> None:
        raise NotImplementedError
