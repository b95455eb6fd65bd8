"""
Tests unitarios para FullSyncRunner (clientes -> parcelamentos -> cobranzas).
"""
from __future__ import annotations

import asyncio
from typing import List, Optional

import pytest

from asaas_sync.application.sync.full_sync import FullSyncRunner
from asaas_sync.application.sync.types import CancellationToken, SyncOutcome, SyncResult


class StubOrchestrator:
    """Orquestador falso: retorna un resultado fijo y registra las llamadas."""

    def __init__(self, name: str, outcome: SyncOutcome = SyncOutcome.COMPLETED, processed: int = 1) -> None:
        self.name = name
        self.outcome = outcome
        self.processed = processed
        self.tokens: List[Optional[CancellationToken]] = []
        self.cancel_calls = 0

    async def run(self, token: Optional[CancellationToken] = None) -> SyncResult:
        self.tokens.append(token)
        return SyncResult(entity=self.name, outcome=self.outcome, processed=self.processed, new=self.processed)

    def cancel(self) -> bool:
        self.cancel_calls += 1
        return False


def _stages(*outcomes: SyncOutcome) -> List[StubOrchestrator]:
    names = ["clientes", "parcelamentos", "cobrancas"]
    return [StubOrchestrator(name, outcome) for name, outcome in zip(names, outcomes)]


class TestFullSyncRunner:
    @pytest.mark.asyncio
    async def test_runs_all_stages_with_delay_between(self, sleeper) -> None:
        stages = _stages(SyncOutcome.COMPLETED, SyncOutcome.COMPLETED, SyncOutcome.COMPLETED)
        runner = FullSyncRunner(stages, sleeper=sleeper, stage_delay_s=10.0)

        result = await runner.run()

        assert result.outcome == SyncOutcome.COMPLETED
        assert [s.entity for s in result.stages] == ["clientes", "parcelamentos", "cobrancas"]
        assert sleeper.calls == [10.0, 10.0]
        assert result.totals()["processed"] == 3
        assert runner.last_result is result

    @pytest.mark.asyncio
    async def test_failed_stage_does_not_stop_sequence(self, sleeper) -> None:
        stages = _stages(SyncOutcome.FAILED, SyncOutcome.COMPLETED, SyncOutcome.COMPLETED)
        runner = FullSyncRunner(stages, sleeper=sleeper)

        result = await runner.run()

        assert result.outcome == SyncOutcome.FAILED
        assert len(result.stages) == 3

    @pytest.mark.asyncio
    async def test_cancelled_stage_stops_sequence(self, sleeper) -> None:
        stages = _stages(SyncOutcome.COMPLETED, SyncOutcome.CANCELLED, SyncOutcome.COMPLETED)
        runner = FullSyncRunner(stages, sleeper=sleeper)

        result = await runner.run()

        assert result.outcome == SyncOutcome.CANCELLED
        assert len(result.stages) == 2
        assert stages[2].tokens == []

    @pytest.mark.asyncio
    async def test_same_token_is_shared_by_stages(self, sleeper) -> None:
        stages = _stages(SyncOutcome.COMPLETED, SyncOutcome.COMPLETED, SyncOutcome.COMPLETED)
        token = CancellationToken()

        await FullSyncRunner(stages, sleeper=sleeper).run(token)

        assert all(stage.tokens == [token] for stage in stages)

    @pytest.mark.asyncio
    async def test_cancel_during_stage_delay(self) -> None:
        never = asyncio.Event()

        async def blocking_sleeper(seconds: float) -> None:
            await never.wait()

        stages = _stages(SyncOutcome.COMPLETED, SyncOutcome.COMPLETED, SyncOutcome.COMPLETED)
        runner = FullSyncRunner(stages, sleeper=blocking_sleeper, stage_delay_s=10.0)

        task = asyncio.create_task(runner.run())
        for _ in range(10):
            await asyncio.sleep(0)

        assert runner.is_running is True
        assert runner.cancel() is True
        result = await asyncio.wait_for(task, timeout=1.0)

        assert result.outcome == SyncOutcome.CANCELLED
        assert [s.entity for s in result.stages] == ["clientes"]
        assert all(stage.cancel_calls == 0 for stage in stages)
        assert runner.is_running is False

    @pytest.mark.asyncio
    async def test_cancel_reaches_only_the_running_stage(self, sleeper) -> None:
        started = asyncio.Event()

        class BlockingStage(StubOrchestrator):
            async def run(self, token: Optional[CancellationToken] = None) -> SyncResult:
                self.tokens.append(token)
                started.set()
                await token.wait()
                return SyncResult(entity=self.name, outcome=SyncOutcome.CANCELLED)

        stages = [
            StubOrchestrator("clientes"),
            BlockingStage("parcelamentos"),
            StubOrchestrator("cobrancas"),
        ]
        runner = FullSyncRunner(stages, sleeper=sleeper)

        task = asyncio.create_task(runner.run())
        await asyncio.wait_for(started.wait(), timeout=1.0)

        assert runner.cancel() is True
        result = await asyncio.wait_for(task, timeout=1.0)

        assert result.outcome == SyncOutcome.CANCELLED
        assert [stage.cancel_calls for stage in stages] == [0, 1, 0]
        assert stages[2].tokens == []

    @pytest.mark.asyncio
    async def test_already_running(self) -> None:
        never = asyncio.Event()

        async def blocking_sleeper(seconds: float) -> None:
            await never.wait()

        runner = FullSyncRunner(_stages(SyncOutcome.COMPLETED, SyncOutcome.COMPLETED), sleeper=blocking_sleeper)
        task = asyncio.create_task(runner.run())
        for _ in range(10):
            await asyncio.sleep(0)

        second = await runner.run()

        assert second.outcome == SyncOutcome.ALREADY_RUNNING
        assert second.stages == []

        runner.cancel()
        await asyncio.wait_for(task, timeout=1.0)

    def test_result_to_dict(self) -> None:
        from asaas_sync.application.sync.full_sync import FullSyncResult

        result = FullSyncResult(
            outcome=SyncOutcome.COMPLETED,
            stages=[SyncResult(entity="clientes", outcome=SyncOutcome.COMPLETED, processed=2, new=2)],
        )

        data = result.to_dict()
        assert data["status"] == "completed"
        assert data["processed"] == 2
        assert data["stages"][0]["entity"] == "clientes"
