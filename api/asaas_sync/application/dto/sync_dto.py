"""
DTOs de los endpoints de sincronizacion.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from asaas_sync.application.sync.full_sync import FullSyncResult
from asaas_sync.application.sync.types import SyncOutcome, SyncResult


class SyncResultDTO(BaseModel):
    """Resumen de una corrida de sync."""

    success: bool
    status: str
    processed: int = 0
    new: int = 0
    updated: int = 0
    deleted: int = 0
    message: str
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: SyncResult) -> "SyncResultDTO":
        return cls(
            success=result.success,
            status=result.outcome.value,
            processed=result.processed,
            new=result.new,
            updated=result.updated,
            deleted=result.deleted,
            message=result.message(),
            error=result.error,
        )


class FullSyncResultDTO(SyncResultDTO):
    stages: List[SyncResultDTO] = []

    @classmethod
    def from_full_result(cls, result: FullSyncResult) -> "FullSyncResultDTO":
        messages = {
            SyncOutcome.COMPLETED: "Sincronizacion completa concluida",
            SyncOutcome.CANCELLED: "Sincronizacion completa cancelada",
            SyncOutcome.FAILED: "Sincronizacion completa con errores",
            SyncOutcome.ALREADY_RUNNING: "Ya existe una sincronizacion completa en curso",
        }
        return cls(
            success=result.success,
            status=result.outcome.value,
            message=messages[result.outcome],
            stages=[SyncResultDTO.from_result(stage) for stage in result.stages],
            **result.totals(),
        )


class SyncStatusDTO(BaseModel):
    running: bool
    full_sync_running: bool
    entities: Dict[str, Any]
    last_full_sync: Optional[Dict[str, Any]] = None


class SyncCancelResponseDTO(BaseModel):
    success: bool
    message: str
