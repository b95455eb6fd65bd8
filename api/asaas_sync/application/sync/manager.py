"""
Instancias compartidas del motor de sync.

La app construye un SyncManager en el startup (app.state.sync_manager) y
el CLI construye el suyo; asi el single-flight es por proceso.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from asaas_sync.core.config import settings
from asaas_sync.infrastructure.external.asaas.client import AsaasClient
from asaas_sync.infrastructure.external.asaas.mappers import (
    map_charge,
    map_customer,
    map_installment,
)
from asaas_sync.infrastructure.repositories.charge_repository import ChargeRepository
from asaas_sync.infrastructure.repositories.customer_repository import CustomerRepository
from asaas_sync.infrastructure.repositories.installment_repository import InstallmentRepository
from asaas_sync.shared.constants.asaas_constants import (
    CHARGE_PAGE_SIZE,
    CUSTOMER_PAGE_SIZE,
    INSTALLMENT_PAGE_SIZE,
)

from .full_sync import FullSyncRunner
from .orchestrator import SyncOrchestrator
from .types import Sleeper


CUSTOMERS = "clientes"
INSTALLMENTS = "parcelamentos"
CHARGES = "cobrancas"


@dataclass
class SyncManager:
    client: AsaasClient
    customers: SyncOrchestrator
    installments: SyncOrchestrator
    charges: SyncOrchestrator
    full: FullSyncRunner

    def get(self, entity: str) -> SyncOrchestrator:
        return {
            CUSTOMERS: self.customers,
            INSTALLMENTS: self.installments,
            CHARGES: self.charges,
        }[entity]

    @property
    def orchestrators(self) -> list[SyncOrchestrator]:
        return [self.customers, self.installments, self.charges]

    def cancel_all(self) -> bool:
        """Cancela lo que este corriendo. True si habia algo en curso."""
        cancelled = self.full.cancel()
        for orchestrator in self.orchestrators:
            cancelled = orchestrator.cancel() or cancelled
        return cancelled

    def status(self) -> dict:
        entities = {}
        for orchestrator in self.orchestrators:
            current = orchestrator.current_result
            last = orchestrator.last_result
            entities[orchestrator.name] = {
                "state": orchestrator.state.value,
                "current": current.to_dict() if current else None,
                "last": last.to_dict() if last else None,
            }
        return {
            "running": self.full.is_running or any(o.is_running for o in self.orchestrators),
            "full_sync_running": self.full.is_running,
            "entities": entities,
            "last_full_sync": self.full.last_result.to_dict() if self.full.last_result else None,
        }

    async def close(self) -> None:
        await self.client.close()


def build_sync_manager(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    client: Optional[AsaasClient] = None,
    sleeper: Optional[Sleeper] = None,
    record_delay_s: Optional[float] = None,
    page_delay_s: Optional[float] = None,
    stage_delay_s: Optional[float] = None,
) -> SyncManager:
    """Arma los tres orquestadores y el driver completo con la configuracion global."""
    client = client or AsaasClient()
    record_delay_s = settings.SYNC_RECORD_DELAY_SECONDS if record_delay_s is None else record_delay_s
    page_delay_s = settings.SYNC_PAGE_DELAY_SECONDS if page_delay_s is None else page_delay_s
    stage_delay_s = settings.SYNC_STAGE_DELAY_SECONDS if stage_delay_s is None else stage_delay_s

    common = dict(
        session_factory=session_factory,
        sleeper=sleeper,
        record_delay_s=record_delay_s,
        page_delay_s=page_delay_s,
    )
    customers = SyncOrchestrator(
        name=CUSTOMERS,
        page_size=CUSTOMER_PAGE_SIZE,
        fetch_page=client.list_customers,
        mapper=map_customer,
        repository_cls=CustomerRepository,
        reconcile_deletions=True,
        **common,
    )
    installments = SyncOrchestrator(
        name=INSTALLMENTS,
        page_size=INSTALLMENT_PAGE_SIZE,
        fetch_page=client.list_installments,
        mapper=map_installment,
        repository_cls=InstallmentRepository,
        **common,
    )
    charges = SyncOrchestrator(
        name=CHARGES,
        page_size=CHARGE_PAGE_SIZE,
        fetch_page=client.list_payments,
        mapper=map_charge,
        repository_cls=ChargeRepository,
        **common,
    )
    full = FullSyncRunner(
        [customers, installments, charges],
        sleeper=sleeper,
        stage_delay_s=stage_delay_s,
    )
    return SyncManager(
        client=client,
        customers=customers,
        installments=installments,
        charges=charges,
        full=full,
    )
