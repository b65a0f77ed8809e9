"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- `help` y `doctor` comparten el mismo estilo de salida.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from core.domain.commands import RoleCommand


def print_usage(console: Console, command: RoleCommand | None = None) -> None:
    """Imprime el texto de ayuda de los comandos de roles.

    Con `command` solo se muestra su sinopsis; sin él, la lista completa.
    """

    def emit(line: str = "") -> None:
        console.print(line, markup=False, highlight=False, emoji=False, soft_wrap=True)

    if command is not None:
        emit(f"  {command.synopsis()}")
        return

    emit("Role (role) commands:")
    emit("  help or -h")
    emit("    Print this help text.")
    emit()
    for item in RoleCommand:
        emit(f"  {item.synopsis()}")
    emit()


def build_doctor_table() -> Table:
    """Tabla de diagnóstico para `doctor run`."""

    table = Table(title="rolectl doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    return table
