from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping, Optional

from ..core.enums import Role

_KEYS = ("token", "user_id", "name", "role")


@dataclass(frozen=True)
class SessionContext:
    """Logged-in user plus bearer token.

    Built once per request from the persisted session and handed explicitly
    to every service call; nothing looks it up globally.
    """

    token: str
    user_id: int
    name: str
    role: Role

    def authorization_header(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles

    def to_mapping(self) -> dict:
        return {"token": self.token, "user_id": self.user_id, "name": self.name, "role": self.role.value}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Optional["SessionContext"]:
        """Rebuild from persisted storage; None when absent or corrupt."""
        if not data or not data.get("token"):
            return None
        try:
            return cls(
                token=str(data["token"]),
                user_id=int(data["user_id"]),
                name=str(data.get("name") or ""),
                role=Role.parse(str(data["role"])),
            )
        except (KeyError, TypeError, ValueError):
            return None

    @classmethod
    def from_login_response(cls, payload: Mapping[str, Any]) -> "SessionContext":
        user = payload.get("user") or {}
        return cls(
            token=str(payload["token"]),
            user_id=int(user["id"]),
            name=str(user.get("nombre") or ""),
            role=Role.parse(str(user.get("rol") or "")),
        )


def persist(store: MutableMapping[str, Any], ctx: SessionContext) -> None:
    store.update(ctx.to_mapping())


def clear(store: MutableMapping[str, Any]) -> None:
    for key in _KEYS:
        store.pop(key, None)
