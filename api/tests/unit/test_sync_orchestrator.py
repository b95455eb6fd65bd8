"""
Tests unitarios para SyncOrchestrator.

Usa una base SQLite en memoria y un fetch_page falso que devuelve paginas
predefinidas, para verificar:
- upsert idempotente por asaas_id
- columnas locales intactas en el UPDATE
- reconciliacion de borrados solo en corridas completas
- cancelacion cooperativa, single-flight y paginacion
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy import func, select

from asaas_sync.application.sync.orchestrator import SyncOrchestrator
from asaas_sync.application.sync.types import CancellationToken, SyncOutcome, SyncState
from asaas_sync.infrastructure.database.models import ChargeModel, CustomerModel
from asaas_sync.infrastructure.external.asaas.mappers import map_charge, map_customer
from asaas_sync.infrastructure.external.asaas.types import AsaasApiError, AsaasPage
from asaas_sync.infrastructure.repositories.charge_repository import ChargeRepository
from asaas_sync.infrastructure.repositories.customer_repository import CustomerRepository


def _customer(asaas_id: str, nome: Optional[str] = None) -> Dict[str, Any]:
    return {"id": asaas_id, "name": nome or f"Cliente {asaas_id}", "cpfCnpj": "52998224725"}


class FakeRemote:
    """fetch_page falso: sirve paginas en orden y registra (offset, limit)."""

    def __init__(self, pages: List[List[Dict[str, Any]]], fail_on_call: Optional[int] = None) -> None:
        self.pages = pages
        self.fail_on_call = fail_on_call
        self.calls: List[tuple] = []

    async def __call__(self, offset: int, limit: int) -> AsaasPage:
        self.calls.append((offset, limit))
        index = len(self.calls) - 1
        if self.fail_on_call is not None and index == self.fail_on_call:
            raise AsaasApiError("boom", status_code=500, description="Servicio no disponible")
        return AsaasPage(data=self.pages[index], has_more=index < len(self.pages) - 1)


def _customer_orchestrator(session_factory, remote, sleeper, page_size: int = 2) -> SyncOrchestrator:
    return SyncOrchestrator(
        name="clientes",
        page_size=page_size,
        fetch_page=remote,
        mapper=map_customer,
        repository_cls=CustomerRepository,
        session_factory=session_factory,
        sleeper=sleeper,
        record_delay_s=0.1,
        page_delay_s=2.0,
        reconcile_deletions=True,
    )


async def _customers_by_asaas_id(session_factory) -> Dict[str, CustomerModel]:
    async with session_factory() as session:
        result = await session.execute(select(CustomerModel))
        return {row.asaas_id: row for row in result.scalars().all()}


class TestUpsert:
    """Tests del upsert por asaas_id."""

    @pytest.mark.asyncio
    async def test_first_run_inserts_all(self, session_factory, sleeper) -> None:
        remote = FakeRemote([[_customer("cus_1"), _customer("cus_2")], [_customer("cus_3")]])
        orchestrator = _customer_orchestrator(session_factory, remote, sleeper)

        result = await orchestrator.run()

        assert result.outcome == SyncOutcome.COMPLETED
        assert (result.processed, result.new, result.updated) == (3, 3, 0)
        assert set(await _customers_by_asaas_id(session_factory)) == {"cus_1", "cus_2", "cus_3"}

    @pytest.mark.asyncio
    async def test_second_run_is_idempotent(self, session_factory, sleeper) -> None:
        pages = [[_customer("cus_1"), _customer("cus_2")], [_customer("cus_3")]]
        orchestrator = _customer_orchestrator(session_factory, FakeRemote(pages), sleeper)
        await orchestrator.run()

        orchestrator._fetch_page = FakeRemote(pages)
        result = await orchestrator.run()

        assert (result.processed, result.new, result.updated, result.deleted) == (3, 0, 3, 0)
        async with session_factory() as session:
            count = (await session.execute(select(func.count()).select_from(CustomerModel))).scalar_one()
        assert count == 3

    @pytest.mark.asyncio
    async def test_update_keeps_local_columns(self, session_factory, sleeper) -> None:
        async with session_factory() as session:
            session.add(CustomerModel(
                asaas_id="cus_1",
                nome="Nombre viejo",
                verificado=True,
                vendedor_id=7,
                vendedor_nome="Joao",
                foto_documento_url="/uploads/documentos/x.jpg",
            ))
            await session.commit()

        remote = FakeRemote([[_customer("cus_1", "Nombre nuevo")]])
        result = await _customer_orchestrator(session_factory, remote, sleeper).run()

        assert result.updated == 1
        customer = (await _customers_by_asaas_id(session_factory))["cus_1"]
        assert customer.nome == "Nombre nuevo"
        assert customer.verificado is True
        assert customer.vendedor_id == 7
        assert customer.vendedor_nome == "Joao"
        assert customer.foto_documento_url == "/uploads/documentos/x.jpg"

    @pytest.mark.asyncio
    async def test_charges_are_upserted_without_reconciliation(self, session_factory, sleeper) -> None:
        async with session_factory() as session:
            session.add(ChargeModel(asaas_id="pay_old", status="PENDING"))
            await session.commit()

        remote = FakeRemote([[{"id": "pay_1", "status": "RECEIVED", "installment": "ins_1", "value": 50.0}]])
        orchestrator = SyncOrchestrator(
            name="cobrancas",
            page_size=50,
            fetch_page=remote,
            mapper=map_charge,
            repository_cls=ChargeRepository,
            session_factory=session_factory,
            sleeper=sleeper,
        )

        result = await orchestrator.run()

        assert result.new == 1
        assert result.deleted == 0
        async with session_factory() as session:
            rows = {c.asaas_id: c for c in (await session.execute(select(ChargeModel))).scalars()}
        assert rows["pay_1"].parcelamento_asaas_id == "ins_1"
        assert rows["pay_old"].deletado is False


class TestReconciliation:
    """Tests de la reconciliacion de borrados de clientes."""

    @pytest.mark.asyncio
    async def test_missing_customers_are_soft_deleted(self, session_factory, sleeper) -> None:
        async with session_factory() as session:
            for asaas_id in ("cus_A", "cus_B", "cus_C"):
                session.add(CustomerModel(asaas_id=asaas_id, nome=asaas_id))
            session.add(CustomerModel(asaas_id=None, nome="Sin asaas"))
            await session.commit()

        remote = FakeRemote([[_customer("cus_A"), _customer("cus_B")]])
        result = await _customer_orchestrator(session_factory, remote, sleeper).run()

        assert result.outcome == SyncOutcome.COMPLETED
        assert result.deleted == 1
        customers = await _customers_by_asaas_id(session_factory)
        assert customers["cus_A"].deletado is False
        assert customers["cus_B"].deletado is False
        assert customers["cus_C"].deletado is True
        assert customers[None].deletado is False

    @pytest.mark.asyncio
    async def test_remote_deleted_flag_is_mirrored(self, session_factory, sleeper) -> None:
        record = dict(_customer("cus_A"), deleted=True)
        await _customer_orchestrator(session_factory, FakeRemote([[record]]), sleeper).run()

        assert (await _customers_by_asaas_id(session_factory))["cus_A"].deletado is True


class TestPagination:
    @pytest.mark.asyncio
    async def test_fetches_until_has_more_is_false(self, session_factory, sleeper) -> None:
        pages = [
            [_customer("cus_1"), _customer("cus_2")],
            [_customer("cus_3"), _customer("cus_4")],
            [_customer("cus_5")],
        ]
        remote = FakeRemote(pages)

        result = await _customer_orchestrator(session_factory, remote, sleeper, page_size=2).run()

        assert remote.calls == [(0, 2), (2, 2), (4, 2)]
        assert result.pages == 3
        assert result.processed == 5
        # una espera por registro y una entre paginas (no despues de la ultima)
        assert sleeper.calls.count(0.1) == 5
        assert sleeper.calls.count(2.0) == 2

    @pytest.mark.asyncio
    async def test_empty_remote(self, session_factory, sleeper) -> None:
        remote = FakeRemote([[]])

        result = await _customer_orchestrator(session_factory, remote, sleeper).run()

        assert result.outcome == SyncOutcome.COMPLETED
        assert result.processed == 0
        assert len(remote.calls) == 1


class TestFailure:
    @pytest.mark.asyncio
    async def test_failure_keeps_committed_records_and_skips_reconciliation(
        self, session_factory, sleeper
    ) -> None:
        async with session_factory() as session:
            session.add(CustomerModel(asaas_id="cus_Z", nome="Z"))
            await session.commit()

        remote = FakeRemote(
            [[_customer("cus_1"), _customer("cus_2")], [_customer("cus_3")]],
            fail_on_call=1,
        )
        orchestrator = _customer_orchestrator(session_factory, remote, sleeper)

        result = await orchestrator.run()

        assert result.outcome == SyncOutcome.FAILED
        assert result.error == "Servicio no disponible"
        assert result.processed == 2
        customers = await _customers_by_asaas_id(session_factory)
        assert {"cus_1", "cus_2"} <= set(customers)
        assert customers["cus_Z"].deletado is False
        assert orchestrator.state == SyncState.IDLE
        assert orchestrator.last_result is result


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_stops_before_next_record(self, session_factory) -> None:
        token = CancellationToken()

        async def cancelling_sleeper(seconds: float) -> None:
            token.cancel()

        async with session_factory() as session:
            session.add(CustomerModel(asaas_id="cus_Z", nome="Z"))
            await session.commit()

        remote = FakeRemote([[_customer("cus_1"), _customer("cus_2")], [_customer("cus_3")]])
        orchestrator = _customer_orchestrator(session_factory, remote, cancelling_sleeper)

        result = await orchestrator.run(token)

        assert result.outcome == SyncOutcome.CANCELLED
        assert result.processed == 1
        assert len(remote.calls) == 1
        customers = await _customers_by_asaas_id(session_factory)
        assert "cus_2" not in customers
        assert customers["cus_Z"].deletado is False

    @pytest.mark.asyncio
    async def test_cancel_after_last_record_skips_reconciliation(self, session_factory) -> None:
        token = CancellationToken()
        waits: List[float] = []

        async def cancelling_sleeper(seconds: float) -> None:
            waits.append(seconds)
            if len(waits) == 2:
                token.cancel()

        async with session_factory() as session:
            session.add(CustomerModel(asaas_id="cus_Z", nome="Z"))
            await session.commit()

        remote = FakeRemote([[_customer("cus_1"), _customer("cus_2")]])
        orchestrator = _customer_orchestrator(session_factory, remote, cancelling_sleeper)

        result = await orchestrator.run(token)

        assert result.outcome == SyncOutcome.CANCELLED
        assert result.processed == 2
        assert result.deleted == 0
        customers = await _customers_by_asaas_id(session_factory)
        assert customers["cus_Z"].deletado is False
        assert customers["cus_2"].deletado is False

    @pytest.mark.asyncio
    async def test_cancel_without_run_returns_false(self, session_factory, sleeper) -> None:
        orchestrator = _customer_orchestrator(session_factory, FakeRemote([[]]), sleeper)

        assert orchestrator.cancel() is False


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_second_run_returns_already_running(self, session_factory, sleeper) -> None:
        release = asyncio.Event()
        started = asyncio.Event()
        calls = []

        async def blocking_fetch(offset: int, limit: int) -> AsaasPage:
            calls.append(offset)
            started.set()
            await release.wait()
            return AsaasPage(data=[_customer("cus_1")], has_more=False)

        orchestrator = _customer_orchestrator(session_factory, blocking_fetch, sleeper)
        first = asyncio.create_task(orchestrator.run())
        await started.wait()

        assert orchestrator.is_running is True
        assert orchestrator.state == SyncState.RUNNING

        second = await orchestrator.run()
        assert second.outcome == SyncOutcome.ALREADY_RUNNING
        assert second.processed == 0

        release.set()
        first_result = await first

        assert first_result.outcome == SyncOutcome.COMPLETED
        assert calls == [0]
        assert orchestrator.is_running is False

    @pytest.mark.asyncio
    async def test_cancel_while_running(self, session_factory, sleeper) -> None:
        release = asyncio.Event()
        started = asyncio.Event()

        async def blocking_fetch(offset: int, limit: int) -> AsaasPage:
            started.set()
            await release.wait()
            return AsaasPage(data=[_customer("cus_1"), _customer("cus_2")], has_more=True)

        orchestrator = _customer_orchestrator(session_factory, blocking_fetch, sleeper)
        task = asyncio.create_task(orchestrator.run())
        await started.wait()

        assert orchestrator.cancel() is True
        assert orchestrator.state == SyncState.CANCELLING
        release.set()
        result = await task

        assert result.outcome == SyncOutcome.CANCELLED
        assert result.processed == 0
        assert orchestrator.state == SyncState.IDLE
