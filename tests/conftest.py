"""
conftest

Shared fixtures: an in-memory role service standing in for the remote one,
and a CLI state wired to it.
"""

from __future__ import annotations

import threading
from typing import Any

import pytest
from typer.testing import CliRunner

from cli.context import CliState
from core.config import AppSettings
from core.domain.errors import RemoteError
from core.interfaces.role_manager import RemoteCallback


class FakeRoleManager:
    """In-memory role service that answers callbacks from another thread.

    `callback_mode` controls how callback-based calls complete:
    - "success": callback({"ok": True}) after applying the change
    - "failure": callback(None) without applying anything
    - "never": the callback is dropped
    - "twice": success followed by a second (failing) invocation
    """

    def __init__(self) -> None:
        self.holders: dict[tuple[str, int], list[str]] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.bypassing: bool | None = None
        self.callback_mode = "success"
        self.transport_error: str | None = None
        self.closed = 0
        self.threads: list[threading.Thread] = []

    def get_role_holders_as_user(self, role_name: str, user_id: int) -> list[str]:
        self._record("get", role_name, user_id)
        return list(self.holders.get((role_name, user_id), []))

    def add_role_holder_as_user(
        self, role_name: str, package_name: str, flags: int, user_id: int, callback: RemoteCallback
    ) -> None:
        self._record("add", role_name, package_name, flags, user_id)

        def apply() -> None:
            current = self.holders.setdefault((role_name, user_id), [])
            if package_name not in current:
                current.append(package_name)

        self._complete(apply, callback)

    def remove_role_holder_as_user(
        self, role_name: str, package_name: str, flags: int, user_id: int, callback: RemoteCallback
    ) -> None:
        self._record("remove", role_name, package_name, flags, user_id)

        def apply() -> None:
            current = self.holders.get((role_name, user_id), [])
            if package_name in current:
                current.remove(package_name)

        self._complete(apply, callback)

    def clear_role_holders_as_user(self, role_name: str, flags: int, user_id: int, callback: RemoteCallback) -> None:
        self._record("clear", role_name, flags, user_id)
        self._complete(lambda: self.holders.pop((role_name, user_id), None), callback)

    def set_bypassing_role_qualification(self, bypass: bool) -> None:
        self._record("bypass", bypass)
        self.bypassing = bypass

    def close(self) -> None:
        self.closed += 1

    def join(self) -> None:
        for thread in self.threads:
            thread.join(timeout=2)

    def _record(self, name: str, *args: Any) -> None:
        if self.transport_error is not None:
            raise RemoteError(self.transport_error)
        self.calls.append((name, args))

    def _complete(self, apply, callback: RemoteCallback) -> None:
        mode = self.callback_mode

        def worker() -> None:
            if mode == "never":
                return
            if mode == "failure":
                callback(None)
                return
            apply()
            callback({"ok": True})
            if mode == "twice":
                callback(None)

        thread = threading.Thread(target=worker, daemon=True)
        self.threads.append(thread)
        thread.start()


@pytest.fixture
def fake_role_manager() -> FakeRoleManager:
    return FakeRoleManager()


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        service_url="http://roles.test",
        callback_timeout_seconds=0.5,
    )


@pytest.fixture
def cli_state(settings: AppSettings, fake_role_manager: FakeRoleManager) -> CliState:
    return CliState(settings=settings, role_manager_factory=lambda _settings: fake_role_manager)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()
