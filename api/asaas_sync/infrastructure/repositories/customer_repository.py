"""
Repositorio de clientes.
"""
from typing import List, Optional, Set, Tuple

from sqlalchemy import or_, select, update

from asaas_sync.infrastructure.database.models import CustomerModel
from asaas_sync.infrastructure.external.asaas.mappers import CUSTOMER_SYNC_COLUMNS
from asaas_sync.infrastructure.repositories.mirror_repository import MirrorRepository
from asaas_sync.shared.utils.document_validators import only_digits


# Columnas por las que se permite ordenar el listado
_ORDER_COLUMNS = {
    "nome": CustomerModel.nome,
    "criado_em": CustomerModel.criado_em,
    "criadoEm": CustomerModel.criado_em,
    "id": CustomerModel.id,
}

MAX_PAGE_SIZE = 500


class CustomerRepository(MirrorRepository[CustomerModel]):
    """Repositorio de `clientes`: upsert del sync, reconciliacion y consultas."""

    model = CustomerModel
    sync_columns = CUSTOMER_SYNC_COLUMNS

    async def list_active_external_ids(self) -> Set[str]:
        """asaas_id de todos los clientes activos (para la reconciliacion)."""
        result = await self.session.execute(
            select(CustomerModel.asaas_id).where(
                CustomerModel.deletado.is_(False),
                CustomerModel.asaas_id.is_not(None),
            )
        )
        return {row for row in result.scalars().all()}

    async def mark_deleted(self, external_id: str) -> None:
        """Soft-delete de un cliente por asaas_id."""
        await self.session.execute(
            update(CustomerModel)
            .where(CustomerModel.asaas_id == external_id)
            .values(deletado=True)
            .execution_options(synchronize_session=False)
        )

    async def find_active_by_document(self, cpf_cnpj: str) -> Optional[CustomerModel]:
        result = await self.session.execute(
            select(CustomerModel)
            .where(
                CustomerModel.cpf_cnpj == cpf_cnpj,
                CustomerModel.deletado.is_(False),
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def search(
        self,
        *,
        busca: Optional[str] = None,
        ordem: str = "nome",
        limite: int = 100,
        pagina: int = 1,
    ) -> Tuple[List[CustomerModel], int]:
        """
        Listado paginado de clientes activos.

        - busca: por nombre (case-insensitive) o, si trae digitos, tambien por CPF/CNPJ
        - ordem: nome | criado_em | id (cualquier otro valor cae en nome)
        - limite: maximo 500
        """
        filters = []
        if busca and busca.strip():
            digits = only_digits(busca)
            name_filter = CustomerModel.nome.ilike(f"%{busca.strip()}%")
            if digits:
                filters.append(or_(name_filter, CustomerModel.cpf_cnpj.like(f"%{digits}%")))
            else:
                filters.append(name_filter)

        order_column = _ORDER_COLUMNS.get(ordem, CustomerModel.nome)
        limite = min(max(limite, 1), MAX_PAGE_SIZE)
        pagina = max(pagina, 1)

        return await self.list_active(
            filters=filters,
            order_by=[order_column.asc()],
            limit=limite,
            offset=(pagina - 1) * limite,
        )

    async def update_local(self, customer: CustomerModel, **values) -> CustomerModel:
        """Actualiza campos de un cliente ya cargado (flujo manual)."""
        for key, value in values.items():
            setattr(customer, key, value)
        await self.session.flush()
        await self.session.refresh(customer)
        return customer
