"""
Repositorio de parcelamentos.
"""
from typing import List, Optional, Tuple

from asaas_sync.infrastructure.database.models import InstallmentModel
from asaas_sync.infrastructure.external.asaas.mappers import INSTALLMENT_SYNC_COLUMNS
from asaas_sync.infrastructure.repositories.mirror_repository import MirrorRepository


class InstallmentRepository(MirrorRepository[InstallmentModel]):
    model = InstallmentModel
    sync_columns = INSTALLMENT_SYNC_COLUMNS

    async def search(
        self,
        *,
        cliente: Optional[str] = None,
        forma_pagamento: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[InstallmentModel], int]:
        """Listado de parcelamentos activos, mas recientes primero."""
        filters = []
        if cliente:
            filters.append(InstallmentModel.cliente_asaas_id == cliente)
        if forma_pagamento:
            filters.append(InstallmentModel.forma_pagamento == forma_pagamento)

        return await self.list_active(
            filters=filters,
            order_by=[
                InstallmentModel.data_criacao_asaas.desc(),
                InstallmentModel.id.desc(),
            ],
            limit=limit,
            offset=offset,
        )
