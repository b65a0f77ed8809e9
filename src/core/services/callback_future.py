"""Puente callback → espera bloqueante.

Some role operations only report completion through a callback fired on a
thread we do not own. `CallbackFuture` turns that into a single blocking wait
with a bounded timeout, so a CLI handler can return a plain exit code.

`concurrent.futures.Future` already gives single assignment and a
happens-before edge between `set_result` and `result()`, so no extra locking
is needed here.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, InvalidStateError
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any

from rich.console import Console

from core.domain.commands import CallState
from core.domain.errors import RemoteCallFailed
from core.interfaces.role_manager import RemoteCallback

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


class CallbackFuture:
    """Completion cell for one outstanding remote call."""

    def __init__(self, *, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._future: Future[dict[str, Any]] = Future()
        self._timeout_seconds = timeout_seconds

    @property
    def state(self) -> CallState:
        if not self._future.done():
            return CallState.PENDING
        if self._future.exception() is None:
            return CallState.SUCCESS
        return CallState.FAILURE

    def create_callback(self) -> RemoteCallback:
        """Build the callback handed to the remote call.

        Only the first invocation counts; later ones are logged and dropped.
        """

        def callback(result: dict[str, Any] | None) -> None:
            try:
                if result is not None:
                    self._future.set_result(result)
                else:
                    self._future.set_exception(RemoteCallFailed("Failed"))
            except InvalidStateError:
                logger.warning("Ignoring completion callback: call already resolved (%s)", self.state.value)

        return callback

    def wait_for_result(self, err: Console) -> int:
        """Block until the callback fires or the timeout expires.

        Returns 0 on success, -1 otherwise after printing a diagnostic to `err`.
        """

        try:
            self._await()
            return 0
        except Exception as exc:
            detail = str(exc) or type(exc).__name__
            err.print(f"Error: see logs for details.\n{detail}", markup=False, highlight=False, emoji=False, soft_wrap=True)
            return -1

    def _await(self) -> dict[str, Any]:
        try:
            return self._future.result(timeout=self._timeout_seconds)
        except FuturesTimeoutError:
            timeout = TimeoutError(
                f"No completion callback within {self._timeout_seconds:g}s; "
                "the remote operation may still finish on its own."
            )
            try:
                self._future.set_exception(timeout)
            except InvalidStateError:
                # Callback landed right at the deadline; honour it.
                return self._future.result(timeout=0)
            logger.warning("Remote call timed out after %ss", self._timeout_seconds)
            raise timeout from None
