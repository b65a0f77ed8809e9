"""Estado compartido de la CLI.

Por qué un objeto de contexto:
- Typer/Click lo propaga a todos los subcomandos vía `ctx.obj`.
- Los tests inyectan settings, transporte HTTP o un RoleManager falso sin
  tocar variables de entorno ni la red.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import httpx

from adapters.http_client import build_client
from adapters.http_role_manager import HttpRoleManager
from core.config import AppSettings
from core.interfaces.role_manager import RoleManager


@dataclass
class CliState:
    """Collaborators for one CLI invocation."""

    settings: AppSettings = field(default_factory=AppSettings)
    transport: httpx.BaseTransport | None = None
    role_manager_factory: Callable[[AppSettings], RoleManager] | None = None

    def build_client(self) -> httpx.Client:
        return build_client(self.settings, transport=self.transport)

    def build_role_manager(self) -> RoleManager:
        if self.role_manager_factory is not None:
            return self.role_manager_factory(self.settings)
        return HttpRoleManager(self.settings, client=self.build_client())
