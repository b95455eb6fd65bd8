"""
Casos de uso de la aplicacion.
"""
from .auth_use_cases import AuthUseCases
from .customer_use_cases import CustomerUseCases
from .mirror_use_cases import ChargeQueryUseCases, InstallmentQueryUseCases
from .sale_use_cases import SaleUseCases
from .sync_use_cases import SyncUseCases

__all__ = [
    "AuthUseCases",
    "CustomerUseCases",
    "InstallmentQueryUseCases",
    "ChargeQueryUseCases",
    "SaleUseCases",
    "SyncUseCases",
]
