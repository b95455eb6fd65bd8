"""
Consultas de parcelamentos y cobranzas (tablas espejo de Asaas).
"""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from asaas_sync.application.dto.mirror_dto import (
    ChargeListResponseDTO,
    ChargeResponseDTO,
    InstallmentListResponseDTO,
    InstallmentResponseDTO,
)
from asaas_sync.infrastructure.repositories.charge_repository import ChargeRepository
from asaas_sync.infrastructure.repositories.installment_repository import InstallmentRepository
from asaas_sync.shared.exceptions.domain import EntityNotFoundException


class InstallmentQueryUseCases:
    def __init__(self, db: AsyncSession):
        self.repository = InstallmentRepository(db)

    async def list_installments(
        self,
        cliente: Optional[str] = None,
        forma_pagamento: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> InstallmentListResponseDTO:
        rows, total = await self.repository.search(
            cliente=cliente, forma_pagamento=forma_pagamento, limit=limit, offset=offset
        )
        return InstallmentListResponseDTO(
            data=[InstallmentResponseDTO.model_validate(row) for row in rows],
            total=total,
            limit=limit,
            offset=offset,
        )

    async def get_installment(self, identifier: str) -> InstallmentResponseDTO:
        """Busca por id local o por asaas_id."""
        installment = await self.repository.get_by_local_or_external_id(identifier)
        if installment is None:
            raise EntityNotFoundException("Parcelamento", identifier)
        return InstallmentResponseDTO.model_validate(installment)


class ChargeQueryUseCases:
    def __init__(self, db: AsyncSession):
        self.repository = ChargeRepository(db)

    async def list_charges(
        self,
        cliente: Optional[str] = None,
        status: Optional[str] = None,
        forma_pagamento: Optional[str] = None,
        parcelamento: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> ChargeListResponseDTO:
        rows, total = await self.repository.search(
            cliente=cliente,
            status=status,
            forma_pagamento=forma_pagamento,
            parcelamento=parcelamento,
            limit=limit,
            offset=offset,
        )
        return ChargeListResponseDTO(
            data=[ChargeResponseDTO.model_validate(row) for row in rows],
            total=total,
            limit=limit,
            offset=offset,
        )

    async def get_charge(self, identifier: str) -> ChargeResponseDTO:
        """Busca por id local o por asaas_id."""
        charge = await self.repository.get_by_local_or_external_id(identifier)
        if charge is None:
            raise EntityNotFoundException("Cobranza", identifier)
        return ChargeResponseDTO.model_validate(charge)
