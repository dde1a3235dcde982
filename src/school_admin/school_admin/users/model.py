from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class StaffProfile:
    """Perfil del personal.

    Note: the password is write-only. It is never read back from the API nor
    kept on the model, so edit forms cannot pre-fill it.
    """

    user_id: int
    name: str
    role: Role

    @property
    def id(self) -> int:
        return self.user_id
