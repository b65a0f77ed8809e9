"""Doctor command for environment diagnostics."""

from __future__ import annotations

import httpx
import typer
from rich.console import Console

from cli.context import CliState
from cli.ui_components import build_doctor_table
from core.config import write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _state(ctx: typer.Context) -> CliState:
    if isinstance(ctx.obj, CliState):
        return ctx.obj
    return CliState()


def _check_service(state: CliState) -> tuple[bool, str]:
    try:
        with state.build_client() as client:
            response = client.get("/")
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    state = _state(ctx)
    settings = state.settings

    table = build_doctor_table()
    table.add_row("Service URL", "OK", settings.service_url)
    if settings.api_token:
        table.add_row("API token", "OK", "Bearer token configured")
    else:
        table.add_row("API token", "OPTIONAL", "No token set -> unauthenticated requests")
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row("Callback timeout", "OK", f"{settings.callback_timeout_seconds:g}s")

    ok_http, detail_http = _check_service(state)
    table.add_row("Service connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] Set ROLECTL_SERVICE_URL or run `rolectl doctor setup` "
            "to point at a reachable role service."
        )
        raise typer.Exit(1)


@app.command()
def setup(ctx: typer.Context) -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = _state(ctx).settings

    service_url = typer.prompt("Role service URL", default=settings.service_url, show_default=True).strip()
    api_token = typer.prompt(
        "API token (leave empty for none)",
        default="",
        show_default=False,
        hide_input=True,
    ).strip()

    if not service_url.startswith(("http://", "https://")):
        raise typer.BadParameter("service URL must start with http:// or https://")

    values = {"ROLECTL_SERVICE_URL": service_url}
    if api_token:
        values["ROLECTL_API_TOKEN"] = api_token
    env_path = write_user_env_vars(values)

    _console.print(f"[green]Saved role service config to:[/green] {env_path}")
