"""
Tipos puros para la integracion con Asaas (sin I/O).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class AsaasPage:
    """
    Una pagina de un listado de Asaas.

    Contrato de paginacion: el request lleva offset/limit y la respuesta trae
    `data` (lista) y `hasMore` (bool).
    """

    data: list[dict[str, Any]] = field(default_factory=list)
    has_more: bool = False
    total_count: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AsaasPage":
        return cls(
            data=list(payload.get("data") or []),
            has_more=bool(payload.get("hasMore", False)),
            total_count=payload.get("totalCount"),
        )


class AsaasApiError(RuntimeError):
    """
    Error de integracion con Asaas.

    - status_code: HTTP status de la respuesta (None si fue error de red)
    - description: primer `errors[].description` devuelto por Asaas, si existe
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        description: Optional[str] = None,
        payload: Any = None,
    ) -> None:
        self.status_code = status_code
        self.description = description
        self.payload = payload
        super().__init__(message)

    @property
    def user_message(self) -> str:
        """Mensaje apto para mostrar al usuario (prioriza la descripcion de Asaas)."""
        return self.description or str(self)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


def extract_error_description(payload: Any) -> Optional[str]:
    """
    Extrae la descripcion del primer error de una respuesta de Asaas:
    {"errors": [{"code": "...", "description": "..."}]}
    """
    if not isinstance(payload, dict):
        return None
    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict):
            return first.get("description")
    return None
