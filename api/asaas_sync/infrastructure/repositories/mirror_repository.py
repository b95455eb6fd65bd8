"""
Repositorio base para las tablas espejo de Asaas (SQLAlchemy async).

Contrato del upsert usado por el sync:
- find_by_external_id: id local o None
- insert: crea la fila y retorna el id local
- update: sobrescribe SOLO las columnas sincronizadas

Los metodos hacen flush, no commit: el caller controla la transaccion
(el sync confirma cada escritura; la venta confirma todo junto).
"""
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession


ModelT = TypeVar("ModelT")


class MirrorRepository(Generic[ModelT]):
    """Operaciones comunes a clientes, parcelamentos y cobranzas."""

    model: Type[ModelT]
    sync_columns: Tuple[str, ...] = ()

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_external_id(self, external_id: str) -> Optional[int]:
        """Retorna el id local de la fila con ese asaas_id, o None."""
        result = await self.session.execute(
            select(self.model.id).where(self.model.asaas_id == external_id)
        )
        return result.scalar_one_or_none()

    async def insert(self, row: Dict[str, Any]) -> int:
        """Inserta una fila nueva y retorna su id local."""
        db_obj = self.model(**row)
        self.session.add(db_obj)
        await self.session.flush()
        return db_obj.id

    async def update(self, external_id: str, row: Dict[str, Any]) -> None:
        """
        Sobrescribe las columnas sincronizadas de la fila `external_id`.

        Las columnas locales (no presentes en sync_columns) no se tocan.
        """
        values = {
            key: value
            for key, value in row.items()
            if key in self.sync_columns and key != "asaas_id"
        }
        await self.session.execute(
            update(self.model)
            .where(self.model.asaas_id == external_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    async def get_by_id(self, local_id: int, include_deleted: bool = False) -> Optional[ModelT]:
        query = select(self.model).where(self.model.id == local_id)
        if not include_deleted:
            query = query.where(self.model.deletado.is_(False))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_external_id(self, external_id: str) -> Optional[ModelT]:
        result = await self.session.execute(
            select(self.model).where(self.model.asaas_id == external_id)
        )
        return result.scalar_one_or_none()

    async def get_by_local_or_external_id(self, identifier: str) -> Optional[ModelT]:
        """
        Busca por id local (si el identificador es numerico) o por asaas_id.
        Solo filas activas.
        """
        if identifier.isdigit():
            found = await self.get_by_id(int(identifier))
            if found is not None:
                return found
        found = await self.get_by_external_id(identifier)
        if found is None or found.deletado:
            return None
        return found

    async def list_active(
        self,
        *,
        filters: Iterable[Any] = (),
        order_by: Sequence[Any] = (),
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[ModelT], int]:
        """
        Lista filas activas con filtros arbitrarios.

        Returns:
            (filas de la pagina, total que cumple los filtros)
        """
        conditions = [self.model.deletado.is_(False), *filters]

        count_result = await self.session.execute(
            select(func.count()).select_from(self.model).where(*conditions)
        )
        total = count_result.scalar_one()

        query = select(self.model).where(*conditions)
        if order_by:
            query = query.order_by(*order_by)
        result = await self.session.execute(query.offset(offset).limit(limit))
        return list(result.scalars().all()), total
