"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .auth_dto import (
    CurrentUserDTO,
    LoginRequestDTO,
    LoginResponseDTO,
    RegisterRequestDTO,
    RegisterResponseDTO,
    UserResponseDTO,
)
from .customer_dto import (
    CustomerCreatedDTO,
    CustomerCreateResponseDTO,
    CustomerListResponseDTO,
    CustomerResponseDTO,
    CustomerUpdateDTO,
    VerificationRequestDTO,
)
from .mirror_dto import (
    ChargeListResponseDTO,
    ChargeResponseDTO,
    InstallmentListResponseDTO,
    InstallmentResponseDTO,
)
from .sale_dto import SaleDTO, SaleInstallmentDTO, SaleResponseDTO

__all__ = [
    "CurrentUserDTO",
    "LoginRequestDTO",
    "LoginResponseDTO",
    "RegisterRequestDTO",
    "RegisterResponseDTO",
    "UserResponseDTO",
    "CustomerCreatedDTO",
    "CustomerCreateResponseDTO",
    "CustomerListResponseDTO",
    "CustomerResponseDTO",
    "CustomerUpdateDTO",
    "VerificationRequestDTO",
    "ChargeListResponseDTO",
    "ChargeResponseDTO",
    "InstallmentListResponseDTO",
    "InstallmentResponseDTO",
    "SaleDTO",
    "SaleInstallmentDTO",
    "SaleResponseDTO",
]
