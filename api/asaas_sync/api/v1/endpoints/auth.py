"""
Endpoints de autenticacion (usuarios locales con JWT).
"""
from fastapi import APIRouter, Depends, status

from asaas_sync.api.v1.dependencies.auth_deps import get_current_user
from asaas_sync.api.v1.dependencies.use_case_deps import get_auth_use_cases
from asaas_sync.application.dto.auth_dto import (
    CurrentUserDTO,
    LoginRequestDTO,
    LoginResponseDTO,
    RegisterRequestDTO,
    RegisterResponseDTO,
    UserResponseDTO,
)
from asaas_sync.application.use_cases.auth_use_cases import AuthUseCases


router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=RegisterResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar un usuario (vendedor o administrador)",
)
async def register(
    dto: RegisterRequestDTO,
    use_cases: AuthUseCases = Depends(get_auth_use_cases),
) -> RegisterResponseDTO:
    return await use_cases.register(dto)


@router.post(
    "/login",
    response_model=LoginResponseDTO,
    summary="Login con email y contraseña",
)
async def login(
    dto: LoginRequestDTO,
    use_cases: AuthUseCases = Depends(get_auth_use_cases),
) -> LoginResponseDTO:
    """
    Valida credenciales y emite un JWT (24h por defecto).

    Returns:
        LoginResponseDTO: token Bearer y datos del usuario
    """
    return await use_cases.login(dto)


@router.get(
    "/me",
    response_model=UserResponseDTO,
    summary="Usuario autenticado",
)
async def me(
    current_user: CurrentUserDTO = Depends(get_current_user),
    use_cases: AuthUseCases = Depends(get_auth_use_cases),
) -> UserResponseDTO:
    return await use_cases.me(current_user.id)
