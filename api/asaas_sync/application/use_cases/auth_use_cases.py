"""
Casos de uso para autenticacion de usuarios locales (vendedores y administradores).
"""

from __future__ import annotations

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from asaas_sync.application.dto.auth_dto import (
    LoginRequestDTO,
    LoginResponseDTO,
    RegisterRequestDTO,
    RegisterResponseDTO,
    UserResponseDTO,
)
from asaas_sync.core.security import security_service
from asaas_sync.infrastructure.database.models import UserModel
from asaas_sync.infrastructure.repositories.user_repository import UserRepository
from asaas_sync.shared.exceptions.auth import (
    InactiveUserException,
    InvalidCredentialsException,
    InvalidTokenException,
)
from asaas_sync.shared.exceptions.domain import ValidationException


def build_token_payload(user: UserModel) -> dict:
    """Claims del JWT: id, email, nome y tipo del usuario."""
    return {
        "sub": str(user.id),
        "id": user.id,
        "email": user.email,
        "nome": user.nome,
        "tipo": user.tipo_usuario,
    }


class AuthUseCases:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.repository = UserRepository(db)

    async def register(self, data: RegisterRequestDTO) -> RegisterResponseDTO:
        email = data.email.lower()
        if await self.repository.get_by_email(email):
            raise ValidationException("Email ya registrado", field="email")

        user = await self.repository.create(
            nome=data.nome,
            email=email,
            senha_hash=security_service.hash_password(data.senha),
            tipo_usuario=data.tipo_usuario.value,
        )
        logger.info(f"[AUTH] Nuevo usuario registrado: {user.nome} ({user.email})")
        return RegisterResponseDTO(user_id=str(user.id))

    async def login(self, data: LoginRequestDTO) -> LoginResponseDTO:
        user = await self.repository.get_by_email(data.email)
        if user is None:
            raise InvalidCredentialsException()
        if not user.ativo:
            raise InactiveUserException()
        if not security_service.verify_password(data.senha, user.senha_hash):
            raise InvalidCredentialsException()

        await self.repository.touch_last_login(user)
        token = security_service.create_access_token(build_token_payload(user))
        logger.info(f"[AUTH] Login: {user.email}")
        return LoginResponseDTO(
            access_token=token,
            user=UserResponseDTO.model_validate(user),
        )

    async def me(self, user_id: int) -> UserResponseDTO:
        user = await self.repository.get_by_id(user_id)
        if user is None:
            raise InvalidTokenException()
        if not user.ativo:
            raise InactiveUserException()
        return UserResponseDTO.model_validate(user)
