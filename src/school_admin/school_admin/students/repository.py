from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..api.session import SessionContext
from .model import Student, StudentInput


class StudentRepository(Protocol):
    def list_all(self, *, ctx: SessionContext) -> Sequence[Student]:
        raise NotImplementedError

    def create(self, *, ctx: SessionContext, data: StudentInput) -> Optional[int]:
        raise NotImplementedError

    def update(self, *, ctx: SessionContext, student_id: int, data: StudentInput) -> None:
        raise NotImplementedError

    def delete(self, *, ctx: SessionContext, student_id: int) -> None:
        raise NotImplementedError

    # Group-level operations
    def bulk_create(self, *, ctx: SessionContext, students: Sequence[StudentInput]) -> None:
        raise NotImplementedError

    def update_group(
        self,
        *,
        ctx: SessionContext,
        group: str,
        new_group: Optional[str],
        new_year: Optional[int],
        exclude_ids: Sequence[int],
    ) -> None:
        raise NotImplementedError

    def delete_group(self, *, ctx: SessionContext, grade: str, letter: str, exclude_ids: Sequence[int]) -> None:
        raise NotImplementedError
