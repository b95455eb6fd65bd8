"""
Casos de uso de sincronizacion disparados desde la API.
"""
from loguru import logger

from asaas_sync.application.dto.sync_dto import (
    FullSyncResultDTO,
    SyncCancelResponseDTO,
    SyncResultDTO,
    SyncStatusDTO,
)
from asaas_sync.application.sync.manager import SyncManager


class SyncUseCases:
    def __init__(self, manager: SyncManager):
        self.manager = manager

    async def sync_entity(self, entity: str) -> SyncResultDTO:
        """Corre el sync de una entidad y espera a que termine."""
        result = await self.manager.get(entity).run()
        return SyncResultDTO.from_result(result)

    async def sync_all(self) -> FullSyncResultDTO:
        result = await self.manager.full.run()
        return FullSyncResultDTO.from_full_result(result)

    def status(self) -> SyncStatusDTO:
        return SyncStatusDTO(**self.manager.status())

    def cancel(self) -> SyncCancelResponseDTO:
        cancelled = self.manager.cancel_all()
        if cancelled:
            logger.info("[SYNC] Cancelacion solicitada via API")
            return SyncCancelResponseDTO(success=True, message="Cancelacion solicitada")
        return SyncCancelResponseDTO(success=False, message="No hay sincronizacion en curso")
