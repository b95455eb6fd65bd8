"""
Repositorio de cobranzas.
"""
from typing import List, Optional, Tuple

from asaas_sync.infrastructure.database.models import ChargeModel
from asaas_sync.infrastructure.external.asaas.mappers import CHARGE_SYNC_COLUMNS
from asaas_sync.infrastructure.repositories.mirror_repository import MirrorRepository


class ChargeRepository(MirrorRepository[ChargeModel]):
    model = ChargeModel
    sync_columns = CHARGE_SYNC_COLUMNS

    async def search(
        self,
        *,
        cliente: Optional[str] = None,
        status: Optional[str] = None,
        forma_pagamento: Optional[str] = None,
        parcelamento: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[ChargeModel], int]:
        """Listado de cobranzas activas ordenadas por vencimiento."""
        filters = []
        if cliente:
            filters.append(ChargeModel.cliente_asaas_id == cliente)
        if status:
            filters.append(ChargeModel.status == status)
        if forma_pagamento:
            filters.append(ChargeModel.forma_pagamento == forma_pagamento)
        if parcelamento:
            filters.append(ChargeModel.parcelamento_asaas_id == parcelamento)

        return await self.list_active(
            filters=filters,
            order_by=[ChargeModel.data_vencimento.desc(), ChargeModel.id.desc()],
            limit=limit,
            offset=offset,
        )

    async def list_by_installment(self, installment_asaas_id: str) -> List[ChargeModel]:
        rows, _ = await self.list_active(
            filters=[ChargeModel.parcelamento_asaas_id == installment_asaas_id],
            order_by=[ChargeModel.numero_parcela.asc(), ChargeModel.data_vencimento.asc()],
            limit=1000,
        )
        return rows
