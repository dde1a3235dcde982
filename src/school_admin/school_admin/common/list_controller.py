"""Fetch/mutate/re-fetch loop shared by every list view.

After a successful create/update/delete the whole collection is fetched
again; nothing is patched locally. There is no request sequencing either, so
if two mutations race the last ``load()`` to finish decides what is shown.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from ..core.enums import LoadState
from ..core.exceptions import RemoteServiceError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ListController(Generic[T]):
    def __init__(
        self,
        *,
        fetch: Callable[[], Sequence[T]],
        load_error: str,
        create: Optional[Callable[[Any], Any]] = None,
        update: Optional[Callable[[int, Any], Any]] = None,
        delete: Optional[Callable[[int], Any]] = None,
    ):
        self._fetch = fetch
        self._create = create
        self._update = update
        self._delete = delete
        self.load_error = load_error

        self.state = LoadState.IDLE
        self.items: list[T] = []
        self.error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.state == LoadState.FAILED

    def load(self) -> LoadState:
        self.state = LoadState.LOADING
        self.error = None
        try:
            items = list(self._fetch())
        except RemoteServiceError as e:
            logger.warning("load failed: %s", e)
            self.state = LoadState.FAILED
            self.error = self.load_error
            return self.state

        self.items = items
        self.state = LoadState.LOADED
        return self.state

    def retry(self) -> LoadState:
        return self.load()

    def run(self, action: Callable[[], Any], *, error: str) -> bool:
        """Issue one remote mutation, then reload unconditionally on success.

        On failure the current items and state are left as they were and
        ``error`` is exposed for the view.
        """
        try:
            action()
        except RemoteServiceError as e:
            logger.warning("mutation failed: %s", e)
            self.error = error
            return False

        self.load()
        return True

    @staticmethod
    def _wired(operation: Optional[Callable], name: str) -> Callable:
        if operation is None:
            raise TypeError(f"ListController was built without a {name} callable")
        return operation

    def create(self, payload: Any, *, error: str = "Error al crear el registro.") -> bool:
        create = self._wired(self._create, "create")
        return self.run(lambda: create(payload), error=error)

    def update(self, item_id: int, payload: Any, *, error: str = "Error al actualizar el registro.") -> bool:
        update = self._wired(self._update, "update")
        return self.run(lambda: update(int(item_id), payload), error=error)

    def delete(self, item_id: int, *, confirmed: bool, error: str = "Error al eliminar el registro.") -> bool:
        if not confirmed:
            raise ValidationError("Confirma la eliminación antes de continuar")
        delete = self._wired(self._delete, "delete")
        return self.run(lambda: delete(int(item_id)), error=error)
