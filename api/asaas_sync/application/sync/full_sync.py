"""
Sync de todas las entidades en secuencia:
clientes -> espera -> parcelamentos -> espera -> cobranzas.

La secuencia se corta si una etapa termina cancelada o si el token se
cancela durante una espera entre etapas. Una etapa fallida no corta la
secuencia: las siguientes igual se intentan.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from loguru import logger

from .orchestrator import SyncOrchestrator
from .types import (
    CancellationToken,
    Sleeper,
    SyncOutcome,
    SyncResult,
    cancellable_sleep,
    utc_now,
)


@dataclass
class FullSyncResult:
    """Resultado por etapa de un sync completo."""

    outcome: SyncOutcome
    stages: list[SyncResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.outcome == SyncOutcome.COMPLETED

    def totals(self) -> dict[str, int]:
        return {
            "processed": sum(s.processed for s in self.stages),
            "new": sum(s.new for s in self.stages),
            "updated": sum(s.updated for s in self.stages),
            "deleted": sum(s.deleted for s in self.stages),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.outcome.value,
            **self.totals(),
            "stages": [s.to_dict() for s in self.stages],
        }


class FullSyncRunner:
    """Driver de "sincronizar todo". Single-flight, igual que cada orquestador."""

    def __init__(
        self,
        orchestrators: Sequence[SyncOrchestrator],
        *,
        sleeper: Optional[Sleeper] = None,
        stage_delay_s: float = 10.0,
    ) -> None:
        self._orchestrators = list(orchestrators)
        self._sleep = sleeper or asyncio.sleep
        self._stage_delay_s = stage_delay_s
        self._lock = asyncio.Lock()
        self._token: Optional[CancellationToken] = None
        self._current_stage: Optional[SyncOrchestrator] = None
        self.last_result: Optional[FullSyncResult] = None

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def cancel(self) -> bool:
        if self._token is None or not self.is_running:
            return False
        self._token.cancel()
        # Solo la etapa en curso de esta corrida
        if self._current_stage is not None:
            self._current_stage.cancel()
        logger.info("[SYNC ALL] Cancelacion solicitada")
        return True

    async def run(self, token: Optional[CancellationToken] = None) -> FullSyncResult:
        if self._lock.locked():
            logger.warning("[SYNC ALL] Ya existe una sincronizacion completa en curso")
            return FullSyncResult(outcome=SyncOutcome.ALREADY_RUNNING)

        async with self._lock:
            self._token = token or CancellationToken()
            try:
                result = await self._run_stages(self._token)
            finally:
                self._token = None
            self.last_result = result
            return result

    async def _run_stages(self, token: CancellationToken) -> FullSyncResult:
        started = utc_now()
        logger.info("[SYNC ALL] Iniciando sincronizacion completa")
        result = FullSyncResult(outcome=SyncOutcome.COMPLETED)

        for index, orchestrator in enumerate(self._orchestrators):
            if index > 0:
                logger.info(
                    f"[SYNC ALL] Esperando {self._stage_delay_s:g}s antes de {orchestrator.name}..."
                )
                await cancellable_sleep(self._sleep, self._stage_delay_s, token)
                if token.cancelled:
                    result.outcome = SyncOutcome.CANCELLED
                    break

            self._current_stage = orchestrator
            try:
                stage = await orchestrator.run(token)
            finally:
                self._current_stage = None
            result.stages.append(stage)

            if stage.outcome == SyncOutcome.CANCELLED:
                result.outcome = SyncOutcome.CANCELLED
                break
            if stage.outcome in (SyncOutcome.FAILED, SyncOutcome.ALREADY_RUNNING):
                result.outcome = SyncOutcome.FAILED

        elapsed = (utc_now() - started).total_seconds()
        logger.info(
            f"[SYNC ALL] Fin ({result.outcome.value}) en {elapsed:.1f}s: {result.totals()}"
        )
        return result
