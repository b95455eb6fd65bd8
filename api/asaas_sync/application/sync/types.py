"""
Tipos puros del motor de sync (sin I/O).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Optional


class SyncState(str, Enum):
    """Estado de una instancia de orquestador."""

    IDLE = "idle"
    RUNNING = "running"
    CANCELLING = "cancelling"


class SyncOutcome(str, Enum):
    """Resultado final de una corrida."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"
    ALREADY_RUNNING = "already_running"


# Firma de la espera entre registros/paginas: asyncio.sleep o un fake en tests
Sleeper = Callable[[float], Awaitable[Any]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CancellationToken:
    """
    Token de cancelacion cooperativa.

    El orquestador lo consulta al inicio de cada pagina y de cada registro;
    quien dispara la cancelacion (endpoint, Ctrl+C) solo llama a cancel().
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


async def cancellable_sleep(sleeper: Sleeper, seconds: float, token: CancellationToken) -> None:
    """
    Espera `seconds` con el sleeper dado, cortando antes si el token se cancela.

    Con seconds <= 0 no espera.
    """
    if seconds <= 0 or token.cancelled:
        return
    sleep_task = asyncio.ensure_future(sleeper(seconds))
    cancel_task = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({sleep_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (sleep_task, cancel_task):
            if not task.done():
                task.cancel()
        await asyncio.gather(sleep_task, cancel_task, return_exceptions=True)


@dataclass
class SyncResult:
    """
    Resultado de una corrida de sync de una entidad.

    `processed` cuenta registros completamente escritos; `deleted` solo
    aplica a clientes (reconciliacion).
    """

    entity: str
    outcome: SyncOutcome
    processed: int = 0
    new: int = 0
    updated: int = 0
    deleted: int = 0
    pages: int = 0
    error: Optional[str] = None
    started_at: datetime = field(default_factory=utc_now)
    finished_at: Optional[datetime] = None

    @property
    def success(self) -> bool:
        return self.outcome == SyncOutcome.COMPLETED

    def message(self) -> str:
        if self.outcome == SyncOutcome.COMPLETED:
            return f"Sincronizacion de {self.entity} concluida"
        if self.outcome == SyncOutcome.CANCELLED:
            return f"Sincronizacion de {self.entity} cancelada"
        if self.outcome == SyncOutcome.ALREADY_RUNNING:
            return f"Ya existe una sincronizacion de {self.entity} en curso"
        return f"Error al sincronizar {self.entity}: {self.error}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity,
            "status": self.outcome.value,
            "processed": self.processed,
            "new": self.new,
            "updated": self.updated,
            "deleted": self.deleted,
            "pages": self.pages,
            "error": self.error,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
