"""
DTOs de autenticacion.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from asaas_sync.shared.constants.asaas_constants import UserType


class RegisterRequestDTO(BaseModel):
    """DTO para registrar un usuario local."""

    nome: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    senha: str = Field(..., min_length=6, description="Minimo 6 caracteres")
    tipo_usuario: UserType = Field(default=UserType.VENDEDOR)


class RegisterResponseDTO(BaseModel):
    success: bool = True
    message: str = "Registro realizado con exito"
    user_id: str


class LoginRequestDTO(BaseModel):
    email: EmailStr
    senha: str = Field(..., min_length=1)


class UserResponseDTO(BaseModel):
    """DTO de respuesta de un usuario (sin hash de contraseña)."""

    id: int
    nome: str
    email: str
    tipo_usuario: str
    ativo: bool
    criado_em: Optional[datetime] = None
    ultimo_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginResponseDTO(BaseModel):
    success: bool = True
    message: str = "Login realizado con exito"
    access_token: str
    token_type: str = "bearer"
    user: UserResponseDTO


class CurrentUserDTO(BaseModel):
    """Datos del usuario autenticado tomados del token."""

    id: int
    email: str
    nome: str
    tipo: str

    @property
    def is_admin(self) -> bool:
        return self.tipo == UserType.ADMINISTRADOR.value
