"""
Excepciones relacionadas con autenticación y autorización.
"""
from asaas_sync.shared.exceptions.base import AppException


class AuthException(AppException):
    """Excepción base para errores de autenticación."""

    def __init__(self, message: str, error_code: str = "AUTH_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=401,
            error_code=error_code,
            details=details
        )


class InvalidCredentialsException(AuthException):
    """Excepción para credenciales inválidas."""

    def __init__(self):
        super().__init__(
            message="Credenciales inválidas",
            error_code="INVALID_CREDENTIALS"
        )


class InvalidTokenException(AuthException):
    """Excepción para token inválido o mal formado."""

    def __init__(self):
        super().__init__(
            message="Token inválido",
            error_code="INVALID_TOKEN"
        )


class TokenExpiredException(AuthException):
    """Excepción para token expirado."""

    def __init__(self):
        super().__init__(
            message="El token ha expirado",
            error_code="TOKEN_EXPIRED"
        )


class UnauthorizedException(AuthException):
    """Excepción para acceso no autorizado."""

    def __init__(self, message: str = "Token de acceso requerido"):
        super().__init__(
            message=message,
            error_code="UNAUTHORIZED"
        )


class InactiveUserException(AuthException):
    """Excepción para usuarios desactivados."""

    def __init__(self):
        super().__init__(
            message="Usuario desactivado. Contacte al administrador.",
            error_code="INACTIVE_USER"
        )


class ForbiddenException(AppException):
    """Excepción para acceso prohibido."""

    def __init__(self, message: str = "Acceso denegado. Solo administradores pueden acceder a este recurso."):
        super().__init__(
            message=message,
            status_code=403,
            error_code="FORBIDDEN"
        )
