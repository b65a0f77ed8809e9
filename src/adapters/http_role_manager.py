"""Cliente HTTP del servicio de roles.

Implementa `core.interfaces.role_manager.RoleManager` sobre JSON/HTTP:

- GET    /roles/{role}/holders?user=ID                  -> {"holders": [...]}
- POST   /roles/{role}/holders        {"package", "flags", "user"}
- DELETE /roles/{role}/holders/{package}?flags=F&user=ID
- DELETE /roles/{role}/holders?flags=F&user=ID
- PUT    /bypassing-role-qualification {"bypassing": bool}

Las operaciones con callback se ejecutan en un worker thread; el callback se
invoca desde ese hilo con el JSON de respuesta (éxito) o `None` (fallo).
"""

from __future__ import annotations

import logging
import threading
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from adapters.http_client import build_client
from core.config import AppSettings
from core.domain.errors import RemoteError
from core.domain.models import (
    BypassRoleQualification,
    RoleHolderChange,
    HolderScope,
    RoleHoldersResponse,
)
from core.interfaces.role_manager import RemoteCallback, RoleManager

logger = logging.getLogger(__name__)


def _segment(value: str) -> str:
    return quote(value, safe="")


class HttpRoleManager(RoleManager):
    """Talks to the role-management service over HTTP."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client or build_client(self._settings)
        self._closed = False

    def get_role_holders_as_user(self, role_name: str, user_id: int) -> list[str]:
        response = self._request("GET", f"/roles/{_segment(role_name)}/holders", params={"user": user_id})
        try:
            payload = response.json()
            if isinstance(payload, list):
                payload = {"holders": payload}
            return RoleHoldersResponse.model_validate(payload).holders
        except (ValueError, ValidationError) as exc:
            raise RemoteError(f"Malformed role holders response: {exc}") from exc

    def add_role_holder_as_user(
        self,
        role_name: str,
        package_name: str,
        flags: int,
        user_id: int,
        callback: RemoteCallback,
    ) -> None:
        body = RoleHolderChange(package=package_name, flags=flags, user=user_id)
        self._submit("POST", f"/roles/{_segment(role_name)}/holders", callback, json=_dump(body))

    def remove_role_holder_as_user(
        self,
        role_name: str,
        package_name: str,
        flags: int,
        user_id: int,
        callback: RemoteCallback,
    ) -> None:
        path = f"/roles/{_segment(role_name)}/holders/{_segment(package_name)}"
        params = _dump(HolderScope(flags=flags, user=user_id))
        self._submit("DELETE", path, callback, params=params)

    def clear_role_holders_as_user(
        self,
        role_name: str,
        flags: int,
        user_id: int,
        callback: RemoteCallback,
    ) -> None:
        params = _dump(HolderScope(flags=flags, user=user_id))
        self._submit("DELETE", f"/roles/{_segment(role_name)}/holders", callback, params=params)

    def set_bypassing_role_qualification(self, bypass: bool) -> None:
        body = BypassRoleQualification(bypassing=bypass)
        self._request("PUT", "/bypassing-role-qualification", json=_dump(body))

    def close(self) -> None:
        # Callback threads are daemons: a call abandoned on timeout must not
        # keep the process alive.
        self._closed = True
        self._client.close()

    def __enter__(self) -> "HttpRoleManager":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s %s", method, path, kwargs)
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RemoteError(f"{method} {path} returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise RemoteError(f"{method} {path} failed: {exc}") from exc
        return response

    def _submit(self, method: str, path: str, callback: RemoteCallback, **kwargs: Any) -> None:
        if self._closed:
            raise RemoteError("Role service client is closed")
        worker = threading.Thread(
            target=self._call_with_callback,
            args=(method, path, callback, kwargs),
            name="role-callback",
            daemon=True,
        )
        worker.start()

    def _call_with_callback(
        self,
        method: str,
        path: str,
        callback: RemoteCallback,
        kwargs: dict[str, Any],
    ) -> None:
        result: dict[str, Any] | None = None
        try:
            response = self._request(method, path, **kwargs)
            result = _decode_result(response)
        except RemoteError as exc:
            logger.warning("Role service call failed: %s", exc)
        except Exception:  # pragma: no cover - the callback must still fire
            logger.exception("Unexpected error during %s %s", method, path)
        callback(result)


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json")


def _decode_result(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        payload = response.json()
    except ValueError:
        return {"body": response.text}
    if isinstance(payload, dict):
        return payload
    return {"result": payload}
