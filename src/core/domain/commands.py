"""Role command vocabulary.

The command set is closed: the CLI registers exactly one subcommand per
`RoleCommand` member and the dispatcher keeps a static handler table keyed by
the same enum. Anything else is routed to usage text by the CLI framework.
"""

from __future__ import annotations

from enum import Enum
from typing import Final

# Default user id when `--user` is omitted.
USER_SYSTEM: Final = 0

ROLE_HOLDER_SEPARATOR: Final = ";"


class RoleCommand(str, Enum):
    """Subcommands understood by the role shell."""

    GET_ROLE_HOLDERS = "get-role-holders"
    ADD_ROLE_HOLDER = "add-role-holder"
    REMOVE_ROLE_HOLDER = "remove-role-holder"
    CLEAR_ROLE_HOLDERS = "clear-role-holders"
    SET_BYPASSING_ROLE_QUALIFICATION = "set-bypassing-role-qualification"

    @classmethod
    def lookup(cls, name: str | None) -> "RoleCommand | None":
        """Exact-match lookup; returns None for absent or unknown names."""

        if name is None:
            return None
        try:
            return cls(name)
        except ValueError:
            return None

    def synopsis(self) -> str:
        """One-line usage string shown by `help`."""

        return _SYNOPSES[self]


_SYNOPSES: dict[RoleCommand, str] = {
    RoleCommand.GET_ROLE_HOLDERS: "get-role-holders [--user USER_ID] ROLE",
    RoleCommand.ADD_ROLE_HOLDER: "add-role-holder [--user USER_ID] ROLE PACKAGE [FLAGS]",
    RoleCommand.REMOVE_ROLE_HOLDER: "remove-role-holder [--user USER_ID] ROLE PACKAGE [FLAGS]",
    RoleCommand.CLEAR_ROLE_HOLDERS: "clear-role-holders [--user USER_ID] ROLE [FLAGS]",
    RoleCommand.SET_BYPASSING_ROLE_QUALIFICATION: "set-bypassing-role-qualification true|false",
}


class CallState(str, Enum):
    """Lifecycle of one outstanding callback-based remote call."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"
