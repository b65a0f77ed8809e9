"""Contrato del servicio remoto de roles.

Por qué Protocol:
- El servicio remoto es un colaborador externo; la CLI solo conoce esta forma.
- Permite sustituir el cliente HTTP por un fake en tests sin herencia.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

# Invoked at most once, from a thread the caller does not control.
# A non-None payload means success, None means failure.
RemoteCallback = Callable[[dict[str, Any] | None], None]


@runtime_checkable
class RoleManager(Protocol):
    """Minimal remote surface used by the role shell.

    Every method may raise `core.domain.errors.RemoteError` when the call
    cannot be delivered. The callback-based methods return as soon as the
    request is issued; the outcome arrives later through `callback`.
    """

    def get_role_holders_as_user(self, role_name: str, user_id: int) -> list[str]:
        ...

    def add_role_holder_as_user(
        self,
        role_name: str,
        package_name: str,
        flags: int,
        user_id: int,
        callback: RemoteCallback,
    ) -> None:
        ...

    def remove_role_holder_as_user(
        self,
        role_name: str,
        package_name: str,
        flags: int,
        user_id: int,
        callback: RemoteCallback,
    ) -> None:
        ...

    def clear_role_holders_as_user(
        self,
        role_name: str,
        flags: int,
        user_id: int,
        callback: RemoteCallback,
    ) -> None:
        ...

    def set_bypassing_role_qualification(self, bypass: bool) -> None:
        ...

    def close(self) -> None:
        ...
