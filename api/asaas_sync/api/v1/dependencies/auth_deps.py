"""
Dependencias de autenticacion (Bearer JWT).
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from asaas_sync.application.dto.auth_dto import CurrentUserDTO
from asaas_sync.core.security import security_service
from asaas_sync.shared.exceptions.auth import (
    ForbiddenException,
    InvalidTokenException,
    UnauthorizedException,
)


# auto_error=False: la falta de token se responde con el formato de error de la app
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUserDTO:
    """
    Resuelve el usuario autenticado a partir del JWT.

    Raises:
        UnauthorizedException: si no hay token
        InvalidTokenException / TokenExpiredException: si el token no es valido
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException()

    payload = security_service.decode_access_token(credentials.credentials)
    try:
        return CurrentUserDTO(
            id=int(payload.get("id") or payload.get("sub")),
            email=payload["email"],
            nome=payload.get("nome", ""),
            tipo=payload["tipo"],
        )
    except (KeyError, TypeError, ValueError):
        raise InvalidTokenException()


async def require_admin(
    user: CurrentUserDTO = Depends(get_current_user),
) -> CurrentUserDTO:
    """Solo usuarios `administrador`."""
    if not user.is_admin:
        raise ForbiddenException()
    return user
