"""
Excepciones relacionadas con la lógica de dominio.
"""
from typing import Any, Dict, Optional

from asaas_sync.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class EntityNotFoundException(DomainException):
    """Excepción cuando no se encuentra una entidad."""

    def __init__(self, entity_name: str, entity_id: Any):
        super().__init__(
            message=f"{entity_name} con ID {entity_id} no encontrado",
            error_code="ENTITY_NOT_FOUND",
            details={"entity": entity_name, "id": str(entity_id)}
        )
        self.status_code = 404


class EntityAlreadyExistsException(DomainException):
    """
    Excepción cuando una entidad ya existe.
    `existing` lleva el registro encontrado para que el cliente lo muestre.
    """

    def __init__(
        self,
        message: str,
        existing: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code="ENTITY_ALREADY_EXISTS",
            details={"existing": existing} if existing else None
        )
        self.status_code = 409


class ValidationException(DomainException):
    """Excepción para errores de validación."""

    def __init__(self, message: str, field: str = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details
        )


class ExternalServiceException(AppException):
    """Excepción cuando un servicio externo (Asaas, mensajeria) falla."""

    def __init__(
        self,
        message: str,
        status_code: int = 502,
        error_code: str = "EXTERNAL_SERVICE_ERROR",
        details=None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details
        )
