from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, TypeVar

import requests

from ..core.exceptions import AuthenticationError, AuthorizationError, RemoteServiceError
from .session import SessionContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


def map_rows(rows: Any, mapper: Callable[[dict], T], *, error: str) -> list[T]:
    """Map a JSON list response; a malformed row fails the whole response."""
    try:
        return [mapper(row) for row in rows or []]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("malformed response row: %r", e)
        raise RemoteServiceError(error) from e


@dataclass
class ApiConfig:
    base_url: str
    timeout: Optional[float] = None


class ApiClient:
    """Thin JSON client for the school REST service.

    One ``requests.Session`` is reused for connection pooling; the bearer
    token travels per call with the caller's ``SessionContext``. No retries:
    every retry is a new user action.
    """

    def __init__(self, config: ApiConfig, *, http: Optional[requests.Session] = None):
        self._config = config
        self._http = http or requests.Session()

    @property
    def base_url(self) -> str:
        return self._config.base_url.rstrip("/")

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self, ctx: Optional[SessionContext]) -> dict:
        headers = {"Content-Type": "application/json"}
        if ctx is not None:
            headers.update(ctx.authorization_header())
        return headers

    @staticmethod
    def _error_detail(response: requests.Response) -> Optional[str]:
        try:
            payload = response.json()
        except ValueError:
            return None
        if isinstance(payload, dict):
            return payload.get("message") or payload.get("error")
        return None

    def request(
        self,
        method: str,
        path: str,
        *,
        ctx: Optional[SessionContext] = None,
        json: Any = None,
        expected: Iterable[int] = (200, 201, 204),
        error: str = "Error al comunicarse con el servidor",
    ) -> Any:
        url = self.url(path)
        try:
            response = self._http.request(
                method,
                url,
                headers=self._headers(ctx),
                json=json,
                timeout=self._config.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise RemoteServiceError(error) from e

        logger.debug("%s %s -> %s", method, url, response.status_code)

        if response.status_code == 401:
            raise AuthenticationError(self._error_detail(response) or "Sesión expirada, inicia sesión de nuevo")
        if response.status_code == 403:
            raise AuthorizationError(self._error_detail(response) or "No tienes permiso para esta acción")
        if response.status_code not in tuple(expected):
            detail = self._error_detail(response)
            logger.warning("%s %s -> %s: %s", method, url, response.status_code, detail)
            raise RemoteServiceError(detail or error, status=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)
