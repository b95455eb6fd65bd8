"""
Dependencias para inyeccion de casos de uso.
"""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from asaas_sync.application.sync.manager import SyncManager
from asaas_sync.application.use_cases.auth_use_cases import AuthUseCases
from asaas_sync.application.use_cases.customer_use_cases import CustomerUseCases
from asaas_sync.application.use_cases.mirror_use_cases import (
    ChargeQueryUseCases,
    InstallmentQueryUseCases,
)
from asaas_sync.application.use_cases.sale_use_cases import SaleUseCases
from asaas_sync.application.use_cases.sync_use_cases import SyncUseCases
from asaas_sync.infrastructure.database.session import get_db
from asaas_sync.infrastructure.external.asaas.client import AsaasClient
from asaas_sync.infrastructure.external.verification.verification_client import VerificationClient


def get_sync_manager(request: Request) -> SyncManager:
    """SyncManager creado en el startup (una instancia por proceso)."""
    return request.app.state.sync_manager


def get_asaas_client(request: Request) -> AsaasClient:
    return request.app.state.asaas_client


def get_verification_client() -> VerificationClient:
    return VerificationClient()


async def get_auth_use_cases(
    db: AsyncSession = Depends(get_db)
) -> AuthUseCases:
    return AuthUseCases(db)


async def get_customer_use_cases(
    db: AsyncSession = Depends(get_db),
    asaas: AsaasClient = Depends(get_asaas_client),
    verification: VerificationClient = Depends(get_verification_client),
) -> CustomerUseCases:
    """
    Dependencia para obtener los casos de uso de clientes.

    Args:
        db: Sesion de base de datos
        asaas: Cliente de Asaas compartido
        verification: Cliente del servicio de mensajeria
    """
    return CustomerUseCases(db, asaas=asaas, verification=verification)


async def get_installment_query_use_cases(
    db: AsyncSession = Depends(get_db)
) -> InstallmentQueryUseCases:
    return InstallmentQueryUseCases(db)


async def get_charge_query_use_cases(
    db: AsyncSession = Depends(get_db)
) -> ChargeQueryUseCases:
    return ChargeQueryUseCases(db)


async def get_sale_use_cases(
    db: AsyncSession = Depends(get_db),
    asaas: AsaasClient = Depends(get_asaas_client),
) -> SaleUseCases:
    return SaleUseCases(db, asaas)


def get_sync_use_cases(
    manager: SyncManager = Depends(get_sync_manager)
) -> SyncUseCases:
    return SyncUseCases(manager)
