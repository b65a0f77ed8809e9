"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Valida lo que llega del servicio remoto antes de imprimirlo.
- Da un esquema estable a los cuerpos JSON que envía el adaptador HTTP.

Nota:
- Estos modelos describen *qué* se intercambia, no *cómo* se transporta.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class RoleHoldersResponse(BaseModel):
    """Holders of one role for one user, in the order the service reports them."""

    model_config = ConfigDict(extra="ignore")

    holders: list[str] = Field(
        default_factory=list,
        description="Package names currently holding the role.",
    )


class RoleHolderChange(BaseModel):
    """Body for adding a holder."""

    package: str = Field(
        ...,
        min_length=1,
        description="Package name to add or remove as holder.",
    )
    flags: int = Field(
        default=0,
        description="Opaque manager flags forwarded as-is.",
    )
    user: int = Field(
        ...,
        description="User id the change applies to.",
    )


class HolderScope(BaseModel):
    """Query params shared by remove and clear: which user, which flags."""

    flags: int = Field(default=0)
    user: int = Field(...)


class BypassRoleQualification(BaseModel):
    bypassing: bool = Field(
        ...,
        description="When true the service skips role qualification checks.",
    )
