"""
Motor de sincronizacion Asaas -> base local.

- types: estados, resultados y token de cancelacion
- orchestrator: loop paginado por entidad (single-flight)
- full_sync: secuencia clientes -> parcelamentos -> cobranzas
- manager: instancias compartidas por la app (API y CLI)
"""
from asaas_sync.application.sync.full_sync import FullSyncResult, FullSyncRunner
from asaas_sync.application.sync.manager import SyncManager, build_sync_manager
from asaas_sync.application.sync.orchestrator import SyncOrchestrator
from asaas_sync.application.sync.types import (
    CancellationToken,
    SyncOutcome,
    SyncResult,
    SyncState,
)

__all__ = [
    "CancellationToken",
    "FullSyncResult",
    "FullSyncRunner",
    "SyncManager",
    "SyncOrchestrator",
    "SyncOutcome",
    "SyncResult",
    "SyncState",
    "build_sync_manager",
]
