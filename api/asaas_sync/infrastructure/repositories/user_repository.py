"""
Repositorio de usuarios locales.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select

from asaas_sync.infrastructure.database.models import UserModel


class UserRepository:
    """Acceso a la tabla `usuarios`."""

    def __init__(self, session):
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        """Busca por email (siempre en minusculas)."""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def create(self, nome: str, email: str, senha_hash: str, tipo_usuario: str) -> UserModel:
        user = UserModel(
            nome=nome,
            email=email.lower(),
            senha_hash=senha_hash,
            tipo_usuario=tipo_usuario,
            ativo=True,
        )
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def touch_last_login(self, user: UserModel) -> None:
        user.ultimo_login = datetime.now(timezone.utc)
        await self.session.flush()
