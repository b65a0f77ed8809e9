"""CLI principal (Typer).

Cada subcomando de roles solo parsea argumentos y delega en
`core.services.role_shell.RoleShell`; el código de salida del handler se
convierte en el código de salida del proceso.

Por qué Typer:
- Los errores de uso (argumento faltante, entero inválido, comando
  desconocido) los reporta Click con su ayuda, antes de tocar el servicio.
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console

from cli import doctor
from cli.context import CliState
from cli.ui_components import print_usage
from core.config import configure_logging
from core.domain.commands import USER_SYSTEM, RoleCommand
from core.services.role_shell import RoleShell

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Role (role) commands for a remote role-management service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

UserOption = Annotated[
    int,
    typer.Option("--user", metavar="USER_ID", help="User id to act on (defaults to the system user)."),
]
RoleArgument = Annotated[str, typer.Argument(metavar="ROLE", help="Role name.", show_default=False)]
PackageArgument = Annotated[str, typer.Argument(metavar="PACKAGE", help="Holder package name.", show_default=False)]
FlagsArgument = Annotated[int, typer.Argument(metavar="[FLAGS]", help="Manager flags (base-10 integer).")]
# A negative FLAGS token ("-1") must reach the int positional instead of
# being parsed as an unknown short option.
_NUMERIC_FLAGS = {"ignore_unknown_options": True}


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", metavar="LEVEL", help="DEBUG, INFO, WARNING or ERROR."),
    ] = None,
) -> None:
    """Role (role) commands for a remote role-management service."""

    if not isinstance(ctx.obj, CliState):
        ctx.obj = CliState()
    state: CliState = ctx.obj
    configure_logging(log_level or state.settings.log_level)


def _execute(ctx: typer.Context, command: RoleCommand, **arguments: object) -> None:
    state: CliState = ctx.obj
    role_manager = state.build_role_manager()
    try:
        shell = RoleShell(
            role_manager,
            out=_console,
            err=_err_console,
            callback_timeout_seconds=state.settings.callback_timeout_seconds,
        )
        code = shell.execute(command, **arguments)
    finally:
        role_manager.close()
    raise typer.Exit(code)


@app.command(RoleCommand.GET_ROLE_HOLDERS.value)
def get_role_holders(ctx: typer.Context, role: RoleArgument, user: UserOption = USER_SYSTEM) -> None:
    """Print the holders of ROLE separated by ';'."""

    _execute(ctx, RoleCommand.GET_ROLE_HOLDERS, role=role, user_id=user)


@app.command(RoleCommand.ADD_ROLE_HOLDER.value, context_settings=_NUMERIC_FLAGS)
def add_role_holder(
    ctx: typer.Context,
    role: RoleArgument,
    package: PackageArgument,
    flags: FlagsArgument = 0,
    user: UserOption = USER_SYSTEM,
) -> None:
    """Add PACKAGE as a holder of ROLE and wait for confirmation."""

    _execute(ctx, RoleCommand.ADD_ROLE_HOLDER, role=role, package=package, flags=flags, user_id=user)


@app.command(RoleCommand.REMOVE_ROLE_HOLDER.value, context_settings=_NUMERIC_FLAGS)
def remove_role_holder(
    ctx: typer.Context,
    role: RoleArgument,
    package: PackageArgument,
    flags: FlagsArgument = 0,
    user: UserOption = USER_SYSTEM,
) -> None:
    """Remove PACKAGE from the holders of ROLE and wait for confirmation."""

    _execute(ctx, RoleCommand.REMOVE_ROLE_HOLDER, role=role, package=package, flags=flags, user_id=user)


@app.command(RoleCommand.CLEAR_ROLE_HOLDERS.value, context_settings=_NUMERIC_FLAGS)
def clear_role_holders(
    ctx: typer.Context,
    role: RoleArgument,
    flags: FlagsArgument = 0,
    user: UserOption = USER_SYSTEM,
) -> None:
    """Remove every holder of ROLE and wait for confirmation."""

    _execute(ctx, RoleCommand.CLEAR_ROLE_HOLDERS, role=role, flags=flags, user_id=user)


@app.command(RoleCommand.SET_BYPASSING_ROLE_QUALIFICATION.value)
def set_bypassing_role_qualification(
    ctx: typer.Context,
    value: Annotated[str, typer.Argument(metavar="true|false", show_default=False)],
) -> None:
    """Turn role qualification bypassing on or off."""

    _execute(ctx, RoleCommand.SET_BYPASSING_ROLE_QUALIFICATION, value=value)


@app.command("help")
def help_command(
    command: Annotated[Optional[str], typer.Argument(metavar="[COMMAND]", show_default=False)] = None,
) -> None:
    """Print this help text."""

    print_usage(_console, RoleCommand.lookup(command))


def run() -> None:
    app()
