"""
Orquestador de sincronizacion por entidad.

Flujo de una corrida:
- offset = 0; por pagina: chequear cancelacion, pedir (offset, page_size)
- por registro, en el orden de Asaas: chequear cancelacion, mapear,
  buscar por asaas_id, INSERT o UPDATE (commit individual), esperar
- tras la pagina: offset += page_size; si hasMore, esperar y seguir
- clientes: al completar, soft-delete de los activos no vistos

No hay transaccion alrededor del loop: lo ya confirmado queda aunque la
corrida falle o se cancele. No hay reintentos.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional, Type

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from asaas_sync.infrastructure.external.asaas.types import AsaasApiError, AsaasPage
from asaas_sync.infrastructure.repositories.mirror_repository import MirrorRepository

from .types import (
    CancellationToken,
    Sleeper,
    SyncOutcome,
    SyncResult,
    SyncState,
    utc_now,
)


FetchPage = Callable[[int, int], Awaitable[AsaasPage]]
RecordMapper = Callable[[dict[str, Any]], dict[str, Any]]


class SyncOrchestrator:
    """
    Sync de una entidad (clientes, parcelamentos o cobranzas).

    Una instancia por entidad, compartida por la app: el estado de la
    corrida y el guard de single-flight viven en la instancia.
    """

    def __init__(
        self,
        *,
        name: str,
        page_size: int,
        fetch_page: FetchPage,
        mapper: RecordMapper,
        repository_cls: Type[MirrorRepository],
        session_factory: async_sessionmaker[AsyncSession],
        sleeper: Optional[Sleeper] = None,
        record_delay_s: float = 0.1,
        page_delay_s: float = 2.0,
        reconcile_deletions: bool = False,
    ) -> None:
        self.name = name
        self.page_size = page_size
        self._fetch_page = fetch_page
        self._mapper = mapper
        self._repository_cls = repository_cls
        self._session_factory = session_factory
        self._sleep = sleeper or asyncio.sleep
        self._record_delay_s = record_delay_s
        self._page_delay_s = page_delay_s
        self._reconcile_deletions = reconcile_deletions

        self._lock = asyncio.Lock()
        self._state = SyncState.IDLE
        self._token: Optional[CancellationToken] = None
        self._current: Optional[SyncResult] = None
        self.last_result: Optional[SyncResult] = None

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    @property
    def current_result(self) -> Optional[SyncResult]:
        """Contadores parciales de la corrida en curso (None si esta ociosa)."""
        return self._current

    def cancel(self) -> bool:
        """
        Pide la cancelacion de la corrida en curso.

        Returns:
            True si habia una corrida que cancelar.
        """
        if self._token is None or not self.is_running:
            return False
        if self._state == SyncState.RUNNING:
            self._state = SyncState.CANCELLING
        self._token.cancel()
        logger.info(f"[SYNC {self.name}] Cancelacion solicitada")
        return True

    async def run(self, token: Optional[CancellationToken] = None) -> SyncResult:
        """
        Ejecuta una corrida completa.

        Si ya hay una corrida en curso retorna de inmediato con
        `already_running`, sin tocar Asaas ni la base.
        """
        # locked() + acquire sin await intermedio: no hay carrera en el event loop
        if self._lock.locked():
            logger.warning(f"[SYNC {self.name}] Ya existe una sincronizacion en curso")
            result = SyncResult(entity=self.name, outcome=SyncOutcome.ALREADY_RUNNING)
            result.finished_at = result.started_at
            return result

        async with self._lock:
            self._token = token or CancellationToken()
            self._state = SyncState.RUNNING
            result = SyncResult(entity=self.name, outcome=SyncOutcome.COMPLETED)
            self._current = result
            try:
                await self._run_loop(result, self._token)
            except Exception as e:
                message = e.user_message if isinstance(e, AsaasApiError) else str(e)
                logger.error(f"[SYNC {self.name}] Error al sincronizar: {message}")
                result.outcome = SyncOutcome.FAILED
                result.error = message
            finally:
                result.finished_at = utc_now()
                self.last_result = result
                self._current = None
                self._token = None
                self._state = SyncState.IDLE

            self._log_summary(result)
            return result

    async def _run_loop(self, result: SyncResult, token: CancellationToken) -> None:
        logger.info(f"[SYNC {self.name}] Iniciando sincronizacion...")
        seen: set[str] = set()
        offset = 0

        async with self._session_factory() as session:
            repository = self._repository_cls(session)

            while True:
                if token.cancelled:
                    self._mark_cancelled(result)
                    return

                page = await self._fetch_page(offset, self.page_size)
                result.pages += 1
                logger.info(
                    f"[SYNC {self.name}] Recibidos {len(page.data)} registros (offset={offset})"
                )

                for record in page.data:
                    if token.cancelled:
                        self._mark_cancelled(result)
                        return

                    await self._write_record(session, repository, record, result)
                    if self._reconcile_deletions:
                        seen.add(record.get("id"))

                    await self._sleep(self._record_delay_s)

                offset += self.page_size
                if not page.has_more:
                    break

                logger.info(
                    f"[SYNC {self.name}] Progreso: {result.processed} | "
                    f"Nuevos: {result.new} | Actualizados: {result.updated}"
                )
                await self._sleep(self._page_delay_s)

            # Cancelacion pedida durante la ultima espera de la ultima pagina
            if token.cancelled:
                self._mark_cancelled(result)
                return

            if self._reconcile_deletions:
                result.deleted = await self._reconcile(session, repository, seen)

    async def _write_record(
        self,
        session: AsyncSession,
        repository: MirrorRepository,
        record: dict[str, Any],
        result: SyncResult,
    ) -> None:
        row = self._mapper(record)
        external_id = row["asaas_id"]

        try:
            existing_id = await repository.find_by_external_id(external_id)
            if existing_id is not None:
                await repository.update(external_id, row)
                await session.commit()
                result.updated += 1
                logger.debug(f"[SYNC {self.name}] [ACTUALIZADO] {external_id}")
            else:
                await repository.insert(row)
                await session.commit()
                result.new += 1
                logger.debug(f"[SYNC {self.name}] [NUEVO] {external_id}")
        except Exception:
            await session.rollback()
            raise

        result.processed += 1

    async def _reconcile(
        self,
        session: AsyncSession,
        repository: MirrorRepository,
        seen: set[str],
    ) -> int:
        """Soft-delete de los registros activos que Asaas ya no devuelve."""
        active_ids = await repository.list_active_external_ids()
        missing = sorted(active_ids - seen)
        for external_id in missing:
            await repository.mark_deleted(external_id)
            await session.commit()
            logger.info(f"[SYNC {self.name}] [ELIMINADO] {external_id}")
        return len(missing)

    def _mark_cancelled(self, result: SyncResult) -> None:
        self._state = SyncState.CANCELLING
        result.outcome = SyncOutcome.CANCELLED
        logger.warning(
            f"[SYNC {self.name}] Cancelada tras {result.processed} registros"
        )

    def _log_summary(self, result: SyncResult) -> None:
        summary = (
            f"Total: {result.processed} | Nuevos: {result.new} | "
            f"Actualizados: {result.updated} | Eliminados: {result.deleted}"
        )
        if result.outcome == SyncOutcome.COMPLETED:
            logger.success(f"[SYNC {self.name}] Sincronizacion completada. {summary}")
        elif result.outcome == SyncOutcome.CANCELLED:
            logger.warning(f"[SYNC {self.name}] Sincronizacion cancelada. {summary}")
        else:
            logger.error(f"[SYNC {self.name}] Sincronizacion fallida. {summary}")
