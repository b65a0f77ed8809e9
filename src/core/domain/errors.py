"""Errores del dominio.

Dos familias distintas:
- `RemoteError`: la llamada remota en sí falló (conexión, timeout HTTP, status).
- `RemoteCallFailed`: el servicio respondió, pero el callback reportó fallo.
"""

from __future__ import annotations


class RemoteError(Exception):
    """Transport-level fault while talking to the role service."""


class RemoteCallFailed(Exception):
    """The completion callback reported a logical failure."""
