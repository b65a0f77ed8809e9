"""
test_http_role_manager

Tests for the HTTP client of the role service, using `httpx.MockTransport`
in place of the network.
"""

from __future__ import annotations

import io
import json
from typing import Callable

import httpx
import pytest
from rich.console import Console

from adapters.http_client import build_client
from adapters.http_role_manager import HttpRoleManager
from cli.context import CliState
from cli.main import app
from core.config import AppSettings
from core.domain.errors import RemoteError
from core.services.callback_future import CallbackFuture

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingHandler:
    """MockTransport handler that records requests and replays a response."""

    def __init__(self, response: httpx.Response | Exception) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _manager(settings: AppSettings, handler: Handler) -> HttpRoleManager:
    client = build_client(settings, transport=httpx.MockTransport(handler))
    return HttpRoleManager(settings, client=client)


def _wait(future: CallbackFuture) -> int:
    return future.wait_for_result(Console(file=io.StringIO()))


class TestSynchronousCalls:
    def test_get_role_holders(self, settings) -> None:
        handler = RecordingHandler(httpx.Response(200, json={"holders": ["com.a", "com.b"]}))

        with _manager(settings, handler) as manager:
            holders = manager.get_role_holders_as_user("android.app.role.SMS", 10)

        assert holders == ["com.a", "com.b"]
        request = handler.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/roles/android.app.role.SMS/holders"
        assert request.url.params["user"] == "10"

    def test_get_role_holders_accepts_bare_list(self, settings) -> None:
        handler = RecordingHandler(httpx.Response(200, json=["com.a"]))

        with _manager(settings, handler) as manager:
            assert manager.get_role_holders_as_user("r", 0) == ["com.a"]

    def test_role_name_is_percent_encoded(self, settings) -> None:
        handler = RecordingHandler(httpx.Response(200, json={"holders": []}))

        with _manager(settings, handler) as manager:
            manager.get_role_holders_as_user("odd/role", 0)

        assert b"/roles/odd%2Frole/holders" in handler.requests[0].url.raw_path

    def test_headers(self) -> None:
        settings = AppSettings(_env_file=None, service_url="http://roles.test", api_token="s3cret")
        handler = RecordingHandler(httpx.Response(200, json={"holders": []}))

        with _manager(settings, handler) as manager:
            manager.get_role_holders_as_user("r", 0)

        headers = handler.requests[0].headers
        assert headers["Authorization"] == "Bearer s3cret"
        assert headers["User-Agent"] == settings.user_agent

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json={"holders": [1, {"x": 2}]}),
            httpx.ConnectError("connection refused"),
        ],
    )
    def test_get_role_holders_errors(self, settings, response) -> None:
        with _manager(settings, RecordingHandler(response)) as manager:
            with pytest.raises(RemoteError):
                manager.get_role_holders_as_user("r", 0)

    @pytest.mark.parametrize("bypass", [True, False])
    def test_set_bypassing_role_qualification(self, settings, bypass) -> None:
        handler = RecordingHandler(httpx.Response(204))

        with _manager(settings, handler) as manager:
            manager.set_bypassing_role_qualification(bypass)

        request = handler.requests[0]
        assert request.method == "PUT"
        assert request.url.path == "/bypassing-role-qualification"
        assert json.loads(request.content) == {"bypassing": bypass}

    def test_set_bypassing_transport_error(self, settings) -> None:
        with _manager(settings, RecordingHandler(httpx.ConnectTimeout("timed out"))) as manager:
            with pytest.raises(RemoteError, match="timed out"):
                manager.set_bypassing_role_qualification(True)


class TestCallbackCalls:
    def test_add_role_holder_success(self, settings) -> None:
        handler = RecordingHandler(httpx.Response(201))
        future = CallbackFuture(timeout_seconds=2)

        with _manager(settings, handler) as manager:
            manager.add_role_holder_as_user("r", "com.a", 1, 10, future.create_callback())
            assert _wait(future) == 0

        request = handler.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/roles/r/holders"
        assert json.loads(request.content) == {"package": "com.a", "flags": 1, "user": 10}

    def test_remove_role_holder(self, settings) -> None:
        handler = RecordingHandler(httpx.Response(200, json={"removed": True}))
        future = CallbackFuture(timeout_seconds=2)

        with _manager(settings, handler) as manager:
            manager.remove_role_holder_as_user("r", "com.a", 0, 0, future.create_callback())
            assert _wait(future) == 0

        request = handler.requests[0]
        assert request.method == "DELETE"
        assert request.url.path == "/roles/r/holders/com.a"
        assert dict(request.url.params) == {"flags": "0", "user": "0"}

    def test_clear_role_holders(self, settings) -> None:
        handler = RecordingHandler(httpx.Response(204))
        future = CallbackFuture(timeout_seconds=2)

        with _manager(settings, handler) as manager:
            manager.clear_role_holders_as_user("r", 4, 11, future.create_callback())
            assert _wait(future) == 0

        request = handler.requests[0]
        assert request.method == "DELETE"
        assert request.url.path == "/roles/r/holders"
        assert dict(request.url.params) == {"flags": "4", "user": "11"}

    @pytest.mark.parametrize("response", [httpx.Response(409), httpx.ConnectError("refused")])
    def test_failures_reach_callback_as_none(self, settings, response) -> None:
        future = CallbackFuture(timeout_seconds=2)

        with _manager(settings, RecordingHandler(response)) as manager:
            manager.add_role_holder_as_user("r", "com.a", 0, 0, future.create_callback())
            assert _wait(future) == -1

    def test_submit_after_close(self, settings) -> None:
        manager = _manager(settings, RecordingHandler(httpx.Response(200)))
        manager.close()

        with pytest.raises(RemoteError, match="closed"):
            manager.clear_role_holders_as_user("r", 0, 0, CallbackFuture().create_callback())


class TestCliOverHttp:
    """The whole stack: Typer command -> RoleShell -> HttpRoleManager -> transport."""

    def test_add_role_holder(self, runner, settings) -> None:
        handler = RecordingHandler(httpx.Response(201, json={}))
        state = CliState(settings=settings, transport=httpx.MockTransport(handler))

        result = runner.invoke(app, ["add-role-holder", "--user", "10", "r", "com.a", "2"], obj=state)

        assert result.exit_code == 0
        assert json.loads(handler.requests[0].content) == {"package": "com.a", "flags": 2, "user": 10}

    def test_get_role_holders_server_error(self, runner, settings) -> None:
        handler = RecordingHandler(httpx.Response(503))
        state = CliState(settings=settings, transport=httpx.MockTransport(handler))

        result = runner.invoke(app, ["get-role-holders", "r"], obj=state)

        assert result.exit_code == -1
        assert "Remote exception:" in result.output
        assert "HTTP 503" in result.output
