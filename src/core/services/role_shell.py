"""Role shell: dispatcher + handlers for the role commands.

This module holds everything the CLI layer delegates to once arguments are
parsed. Handlers are plain methods that receive already-typed values and
return an exit code, which keeps them testable with an injected
`RoleManager` and captured consoles. Printing goes through the injected
consoles only.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from rich.console import Console

from core.domain.commands import ROLE_HOLDER_SEPARATOR, USER_SYSTEM, RoleCommand
from core.domain.errors import RemoteError
from core.interfaces.role_manager import RoleManager
from core.services.callback_future import DEFAULT_TIMEOUT_SECONDS, CallbackFuture

logger = logging.getLogger(__name__)


def parse_boolean_literal(value: str) -> bool:
    """Lenient boolean parsing: "true" in any case is True, anything else False.

    No trimming: " true" is not "true".

    A literal that is neither "true" nor "false" is still accepted (as False)
    but logged, so a typo like "ture" does not go unnoticed.
    """

    normalized = value.lower()
    if normalized not in ("true", "false"):
        logger.warning("Unrecognized boolean literal %r, treating it as false", value)
    return normalized == "true"


class RoleShell:
    """Runs one role command against a remote `RoleManager`."""

    def __init__(
        self,
        role_manager: RoleManager,
        *,
        out: Console,
        err: Console,
        callback_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._role_manager = role_manager
        self._out = out
        self._err = err
        self._callback_timeout_seconds = callback_timeout_seconds
        self._handlers: dict[RoleCommand, Callable[..., int]] = {
            RoleCommand.GET_ROLE_HOLDERS: self.get_role_holders,
            RoleCommand.ADD_ROLE_HOLDER: self.add_role_holder,
            RoleCommand.REMOVE_ROLE_HOLDER: self.remove_role_holder,
            RoleCommand.CLEAR_ROLE_HOLDERS: self.clear_role_holders,
            RoleCommand.SET_BYPASSING_ROLE_QUALIFICATION: self.set_bypassing_role_qualification,
        }

    def execute(self, command: RoleCommand, **arguments: Any) -> int:
        """Dispatch `command` to its handler and return the exit code.

        Transport errors abort the handler and are reported here, once.
        """

        handler = self._handlers[command]
        logger.debug("Running %s with %s", command.value, arguments)
        try:
            return handler(**arguments)
        except RemoteError as exc:
            self._print(self._out, f"Remote exception: {exc}")
            return -1

    def get_role_holders(self, role: str, *, user_id: int = USER_SYSTEM) -> int:
        holders = self._role_manager.get_role_holders_as_user(role, user_id)
        self._print(self._out, ROLE_HOLDER_SEPARATOR.join(holders))
        return 0

    def add_role_holder(
        self,
        role: str,
        package: str,
        *,
        flags: int = 0,
        user_id: int = USER_SYSTEM,
    ) -> int:
        future = self._new_future()
        self._role_manager.add_role_holder_as_user(role, package, flags, user_id, future.create_callback())
        return future.wait_for_result(self._err)

    def remove_role_holder(
        self,
        role: str,
        package: str,
        *,
        flags: int = 0,
        user_id: int = USER_SYSTEM,
    ) -> int:
        future = self._new_future()
        self._role_manager.remove_role_holder_as_user(role, package, flags, user_id, future.create_callback())
        return future.wait_for_result(self._err)

    def clear_role_holders(self, role: str, *, flags: int = 0, user_id: int = USER_SYSTEM) -> int:
        future = self._new_future()
        self._role_manager.clear_role_holders_as_user(role, flags, user_id, future.create_callback())
        return future.wait_for_result(self._err)

    def set_bypassing_role_qualification(self, value: str) -> int:
        self._role_manager.set_bypassing_role_qualification(parse_boolean_literal(value))
        return 0

    def _new_future(self) -> CallbackFuture:
        return CallbackFuture(timeout_seconds=self._callback_timeout_seconds)

    @staticmethod
    def _print(console: Console, text: str) -> None:
        # Package names are data: no markup, no highlighting, no wrapping.
        console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)
