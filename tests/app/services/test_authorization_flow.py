"""Testes do orquestrador do fluxo de autorização.

Cenários ponta a ponta, invariantes de etapa e concorrência por proposta.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domain.flow import BankResponse, FlowState, ValidationResult
from app.infra.banks import AdapterRegistry, UnknownBankPolicy, default_adapters
from app.infra.proposals import MemoryProposalLookup
from app.infra.stores import MemoryFlowStore
from app.services.authorization_flow import (
    CANCEL_MESSAGE,
    AuthorizationFlowService,
    FlowProgressMode,
    current_status_for,
)
from app.services.credit_validation import (
    ERROR_BELOW_MINIMUM,
    WARNING_HIGH_VALUE,
    WARNING_MISSING_CPF,
)
from app.services.keyed_lock import KeyedLock
from fsm import FlowStep, create_fsm
from tests.fakes.fake_banks import FakeBankAdapter, make_proposal
from utils.errors import ProposalNotFoundError, UnknownBankCodeError


class _Draws:
    """Fonte de sorteio previsível; registra quantas vezes foi usada."""

    def __init__(self, values: Iterable[float]) -> None:
        self._values = iter(values)
        self.calls = 0

    def __call__(self) -> float:
        self.calls += 1
        return next(self._values)


def _service(
    store: MemoryFlowStore,
    registry: AdapterRegistry,
    lookup: MemoryProposalLookup,
    *,
    draws: Iterable[float] = (),
    mode: FlowProgressMode = FlowProgressMode.RANDOM,
    locks: KeyedLock | None = None,
) -> AuthorizationFlowService:
    return AuthorizationFlowService(
        flow_store=store,
        adapter_registry=registry,
        proposal_lookup=lookup,
        random_source=_Draws(draws),
        progress_mode=mode,
        locks=locks,
    )


def _fake_registry(adapter: FakeBankAdapter) -> AdapterRegistry:
    return AdapterRegistry([adapter], default_bank_code=adapter.bank_code)


@pytest.fixture
def service(
    flow_store: MemoryFlowStore,
    adapter_registry: AdapterRegistry,
    proposal_lookup: MemoryProposalLookup,
) -> AuthorizationFlowService:
    return _service(flow_store, adapter_registry, proposal_lookup)


class TestScenarios:
    """Cenários ponta a ponta do fluxo."""

    @pytest.mark.asyncio
    async def test_eligible_proposal_awaits_bank_response(
        self, service: AuthorizationFlowService, flow_store: MemoryFlowStore
    ) -> None:
        summary = await service.start(1, "itau")

        assert summary.success is True
        assert summary.validation_score == 100
        assert summary.validation_eligible is True
        assert summary.flow_step == "awaiting_response"
        assert summary.current_status == "in_analysis"
        assert summary.client_name == "João da Silva"
        assert summary.product_name == "Crédito Pessoal"
        assert summary.requested_amount == 10000
        assert summary.validation_result is not None
        assert summary.bank_response is not None
        assert summary.bank_response.external_id.startswith("ITAU_")

        state = await flow_store.load_async(1)
        assert state is not None
        assert state.step == FlowStep.AWAITING_RESPONSE
        assert state.bank_code == "itau"

    @pytest.mark.asyncio
    async def test_below_minimum_fails_without_submission(
        self,
        flow_store: MemoryFlowStore,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        adapter = FakeBankAdapter("itau")
        proposal_lookup.add(make_proposal(2, requested_amount=500))
        service = _service(flow_store, _fake_registry(adapter), proposal_lookup)

        summary = await service.start(2, "itau")

        assert summary.success is False
        assert summary.validation_score == 0
        assert summary.validation_eligible is False
        assert summary.errors == [ERROR_BELOW_MINIMUM]
        assert summary.flow_step == "failed"
        assert summary.current_status == "rejected"
        assert summary.bank_response is None
        assert adapter.submitted == []

        state = await flow_store.load_async(2)
        assert state is not None
        assert state.step == FlowStep.FAILED
        assert state.bank_code == "itau"
        assert state.validation_result is not None
        assert state.bank_response is None

    @pytest.mark.asyncio
    async def test_high_value_without_cpf_proceeds_with_warnings(
        self,
        service: AuthorizationFlowService,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        proposal_lookup.add(make_proposal(3, requested_amount=150000, cpf=None))

        summary = await service.start(3, "bb")

        assert summary.validation_score == 65
        assert summary.validation_eligible is True
        assert WARNING_MISSING_CPF in summary.warnings
        assert WARNING_HIGH_VALUE in summary.warnings
        assert summary.recommendations
        assert summary.flow_step == "awaiting_response"
        assert summary.bank_response is not None
        assert summary.bank_response.external_id.startswith("BB_")

    @pytest.mark.asyncio
    async def test_cancel_after_submission_reports_failed(
        self,
        service: AuthorizationFlowService,
        flow_store: MemoryFlowStore,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        proposal_lookup.add(make_proposal(3, requested_amount=150000, cpf=None))
        started = await service.start(3, "bb")

        result = await service.cancel(3)
        summary = await service.get_summary(3)

        assert result == {"message": "Fluxo cancelado com sucesso"}
        assert result["message"] == CANCEL_MESSAGE
        assert summary.flow_step == "failed"
        assert summary.current_status == "rejected"
        assert summary.validation_score == 65

        state = await flow_store.load_async(3)
        assert state is not None
        assert state.validation_result == started.validation_result
        assert state.bank_response == started.bank_response
        assert state.bank_code == "bb"

    @pytest.mark.asyncio
    async def test_unknown_bank_code_uses_default_adapter(
        self, service: AuthorizationFlowService, flow_store: MemoryFlowStore
    ) -> None:
        summary = await service.start(4, "unknown-code")

        assert summary.flow_step == "awaiting_response"
        assert summary.bank_response is not None
        assert summary.bank_response.external_id.startswith("BRD_")
        state = await flow_store.load_async(4)
        assert state is not None
        assert state.bank_code == "unknown-code"

    @pytest.mark.asyncio
    async def test_polling_completes_once_and_stays_completed(
        self,
        flow_store: MemoryFlowStore,
        adapter_registry: AdapterRegistry,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        draws = [0.1, 0.5, 0.6, 0.61, 0.0, 0.99]
        service = _service(flow_store, adapter_registry, proposal_lookup, draws=draws)
        await service.start(6, "bradesco")

        steps = [(await service.get_summary(6)).flow_step for _ in range(6)]

        assert steps == [
            "awaiting_response",
            "awaiting_response",
            "awaiting_response",
            "completed",
            "completed",
            "completed",
        ]
        final = await service.get_summary(6)
        assert final.current_status == "approved"
        # Sem sorteio depois de concluído
        assert service._random.calls == 4


class TestSummaryInvariants:
    @pytest.mark.asyncio
    async def test_summary_without_state_uses_defaults(
        self, service: AuthorizationFlowService, flow_store: MemoryFlowStore
    ) -> None:
        summary = await service.get_summary(50)

        assert summary.flow_step == "unknown"
        assert summary.current_status == "open"
        assert summary.validation_score == 0
        assert summary.validation_eligible is False
        assert summary.errors == summary.warnings == summary.recommendations == []
        assert summary.success is None
        assert summary.validation_result is None
        assert summary.bank_response is None
        assert await flow_store.load_async(50) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "step",
        [FlowStep.VALIDATION_OK, FlowStep.COMPLETED, FlowStep.FAILED],
    )
    async def test_summary_only_moves_awaiting_response(
        self,
        flow_store: MemoryFlowStore,
        adapter_registry: AdapterRegistry,
        proposal_lookup: MemoryProposalLookup,
        step: FlowStep,
    ) -> None:
        service = _service(flow_store, adapter_registry, proposal_lookup, draws=[0.99] * 5)
        await flow_store.save_async(FlowState(proposal_id=9, step=step))

        for _ in range(5):
            summary = await service.get_summary(9)
            assert summary.flow_step == step.value

        assert service._random.calls == 0

    @pytest.mark.parametrize(
        ("step", "status"),
        [
            (None, "open"),
            (FlowStep.VALIDATION_OK, "open"),
            (FlowStep.AWAITING_RESPONSE, "in_analysis"),
            (FlowStep.COMPLETED, "approved"),
            (FlowStep.FAILED, "rejected"),
        ],
    )
    def test_current_status_mapping(self, step: FlowStep | None, status: str) -> None:
        assert current_status_for(step).value == status

    @pytest.mark.asyncio
    async def test_summary_omits_raw_objects(
        self,
        flow_store: MemoryFlowStore,
        adapter_registry: AdapterRegistry,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        service = _service(flow_store, adapter_registry, proposal_lookup, draws=[0.0])
        await service.start(10, "itau")

        summary = await service.get_summary(10)

        assert summary.flow_step == "awaiting_response"
        assert summary.success is None
        assert summary.validation_result is None
        assert summary.bank_response is None
        assert summary.validation_score == 100


class TestCancel:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("step", [None, *FlowStep])
    async def test_cancel_always_results_in_failed(
        self,
        service: AuthorizationFlowService,
        flow_store: MemoryFlowStore,
        step: FlowStep | None,
    ) -> None:
        if step is not None:
            await flow_store.save_async(
                FlowState(
                    proposal_id=20,
                    step=step,
                    validation_result=ValidationResult(eligible=True, score=90),
                    bank_code="bb",
                )
            )

        await service.cancel(20)

        state = await flow_store.load_async(20)
        assert state is not None
        assert state.step == FlowStep.FAILED
        if step is not None:
            assert state.validation_result == ValidationResult(eligible=True, score=90)
            assert state.bank_code == "bb"

    @pytest.mark.asyncio
    async def test_start_is_reentrant_after_cancel(
        self, service: AuthorizationFlowService
    ) -> None:
        await service.start(21, "itau")
        await service.cancel(21)

        summary = await service.start(21, "bb")

        assert summary.flow_step == "awaiting_response"
        assert summary.bank_response is not None
        assert summary.bank_response.external_id.startswith("BB_")


class TestStepMachine:
    """A máquina de etapas decide se o fluxo grava."""

    @pytest.mark.asyncio
    async def test_rejected_transition_blocks_write(
        self,
        flow_store: MemoryFlowStore,
        adapter_registry: AdapterRegistry,
        proposal_lookup: MemoryProposalLookup,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        # Máquina presa em etapa terminal: nenhuma transição normal passa
        monkeypatch.setattr(
            "app.services.authorization_flow.create_fsm",
            lambda proposal_id, initial_step=None: create_fsm(proposal_id, FlowStep.COMPLETED),
        )
        adapter = FakeBankAdapter("itau")
        service = _service(flow_store, _fake_registry(adapter), proposal_lookup)

        with caplog.at_level(logging.WARNING, logger="app.services.authorization_flow"):
            summary = await service.start(10, "itau")

        assert summary.flow_step == "unknown"
        assert await flow_store.load_async(10) is None
        assert adapter.submitted == []
        rejected = [r for r in caplog.records if r.getMessage() == "flow_transition_rejected"]
        assert len(rejected) == 1
        assert rejected[0].trigger == "validation"
        assert rejected[0].state["current_step"] == "completed"

    @pytest.mark.asyncio
    async def test_logs_carry_transition_history(
        self,
        flow_store: MemoryFlowStore,
        adapter_registry: AdapterRegistry,
        proposal_lookup: MemoryProposalLookup,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        service = _service(flow_store, adapter_registry, proposal_lookup)

        with caplog.at_level(logging.INFO, logger="app.services.authorization_flow"):
            await service.start(10, "itau")
            await service.cancel(10)

        by_event = {r.getMessage(): r for r in caplog.records}
        started = by_event["flow_start_finished"].transitions
        assert [(t["from_step"], t["to_step"]) for t in started] == [
            (None, "validation_ok"),
            ("validation_ok", "awaiting_response"),
        ]
        assert not any(t["forced"] for t in started)

        cancelled = by_event["flow_cancelled"].transitions
        assert len(cancelled) == 1
        assert cancelled[0]["from_step"] == "awaiting_response"
        assert cancelled[0]["trigger"] == "cancel"
        assert cancelled[0]["forced"] is True
        assert cancelled[0]["metadata"] == {"preserved": True}


class TestBankFailure:
    @pytest.mark.asyncio
    async def test_rejected_submission_is_data(
        self,
        flow_store: MemoryFlowStore,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        adapter = FakeBankAdapter("itau", response=BankResponse.rejected("Limite excedido"))
        service = _service(flow_store, _fake_registry(adapter), proposal_lookup)

        summary = await service.start(30, "itau")

        assert summary.success is False
        assert summary.flow_step == "failed"
        assert summary.current_status == "rejected"
        assert summary.bank_response == BankResponse.rejected("Limite excedido")
        assert summary.validation_eligible is True

        state = await flow_store.load_async(30)
        assert state is not None
        assert state.step == FlowStep.FAILED
        assert state.bank_response is not None
        assert state.bank_response.error == "Limite excedido"


class TestErrors:
    @pytest.mark.asyncio
    async def test_missing_proposal_propagates(
        self,
        flow_store: MemoryFlowStore,
        adapter_registry: AdapterRegistry,
    ) -> None:
        lookup = MemoryProposalLookup(missing_ids=[404])
        service = _service(flow_store, adapter_registry, lookup)

        with pytest.raises(ProposalNotFoundError):
            await service.start(404, "itau")
        with pytest.raises(ProposalNotFoundError):
            await service.get_summary(404)

        assert await flow_store.load_async(404) is None

    @pytest.mark.asyncio
    async def test_reject_policy_fails_before_writing(
        self,
        flow_store: MemoryFlowStore,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        registry = AdapterRegistry(
            default_adapters(latency_seconds=0),
            default_bank_code="bradesco",
            policy=UnknownBankPolicy.REJECT,
        )
        service = _service(flow_store, registry, proposal_lookup)

        with pytest.raises(UnknownBankCodeError):
            await service.start(40, "nubank")

        assert await flow_store.load_async(40) is None


class TestAdvance:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("bank_status", "expected_step"),
        [
            ("APPROVED", "completed"),
            ("REJECTED", "failed"),
            ("DENIED", "failed"),
            ("PENDING", "awaiting_response"),
            ("IN_ANALYSIS", "awaiting_response"),
        ],
    )
    async def test_advance_follows_bank_status(
        self,
        flow_store: MemoryFlowStore,
        proposal_lookup: MemoryProposalLookup,
        bank_status: str,
        expected_step: str,
    ) -> None:
        adapter = FakeBankAdapter("itau", status=bank_status)
        service = _service(flow_store, _fake_registry(adapter), proposal_lookup)
        await service.start(50, "itau")

        summary = await service.advance(50)

        assert summary.flow_step == expected_step
        assert adapter.status_queries == ["FAKE_1"]

    @pytest.mark.asyncio
    async def test_advance_with_simulated_banks(
        self, service: AuthorizationFlowService
    ) -> None:
        await service.start(51, "bradesco")
        await service.start(52, "itau")
        await service.start(53, "bb")

        assert (await service.advance(51)).current_status == "approved"
        assert (await service.advance(52)).flow_step == "awaiting_response"
        assert (await service.advance(53)).flow_step == "awaiting_response"

    @pytest.mark.asyncio
    async def test_advance_ignores_other_steps(
        self,
        flow_store: MemoryFlowStore,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        adapter = FakeBankAdapter("itau", status="APPROVED")
        service = _service(flow_store, _fake_registry(adapter), proposal_lookup)
        await flow_store.save_async(FlowState(proposal_id=54, step=FlowStep.FAILED))

        summary = await service.advance(54)

        assert summary.flow_step == "failed"
        assert adapter.status_queries == []

    @pytest.mark.asyncio
    async def test_bank_status_mode_drives_summary(
        self,
        flow_store: MemoryFlowStore,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        adapter = FakeBankAdapter("itau", status="PENDING")
        service = _service(
            flow_store,
            _fake_registry(adapter),
            proposal_lookup,
            mode=FlowProgressMode.BANK_STATUS,
        )
        await service.start(55, "itau")

        assert (await service.get_summary(55)).flow_step == "awaiting_response"
        adapter.set_status("APPROVED")
        assert (await service.get_summary(55)).flow_step == "completed"
        assert service._random.calls == 0


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_at_most_one_start_in_flight_per_proposal(
        self,
        flow_store: MemoryFlowStore,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        gate = asyncio.Event()
        adapter = FakeBankAdapter("itau", gate=gate)
        service = _service(flow_store, _fake_registry(adapter), proposal_lookup)

        tasks = [asyncio.create_task(service.start(60, "itau")) for _ in range(3)]
        while not adapter.submitted:
            await asyncio.sleep(0)
        for _ in range(10):
            await asyncio.sleep(0)
        assert adapter.submitted == [60]

        gate.set()
        results = await asyncio.gather(*tasks)

        assert adapter.max_in_flight == 1
        assert adapter.submitted == [60, 60, 60]
        assert all(r.flow_step == "awaiting_response" for r in results)

    @pytest.mark.asyncio
    async def test_different_proposals_submit_concurrently(
        self,
        flow_store: MemoryFlowStore,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        gate = asyncio.Event()
        adapter = FakeBankAdapter("itau", gate=gate)
        service = _service(flow_store, _fake_registry(adapter), proposal_lookup)

        tasks = [asyncio.create_task(service.start(pid, "itau")) for pid in (61, 62)]
        while len(adapter.submitted) < 2:
            await asyncio.sleep(0)
        gate.set()
        await asyncio.gather(*tasks)

        assert adapter.max_in_flight == 2

    @pytest.mark.asyncio
    async def test_cancel_wins_over_in_flight_start(
        self,
        flow_store: MemoryFlowStore,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        gate = asyncio.Event()
        adapter = FakeBankAdapter("itau", gate=gate)
        locks = KeyedLock()
        service = _service(flow_store, _fake_registry(adapter), proposal_lookup, locks=locks)

        task = asyncio.create_task(service.start(63, "itau"))
        while not adapter.submitted:
            await asyncio.sleep(0)

        await service.cancel(63)
        gate.set()
        summary = await task

        assert summary.flow_step == "failed"
        assert summary.success is False
        state = await flow_store.load_async(63)
        assert state is not None
        assert state.step == FlowStep.FAILED
        assert state.bank_response is None
        assert state.validation_result is not None
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_cancel_wins_over_queued_start(
        self,
        flow_store: MemoryFlowStore,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        """start que ainda espera o lock também não sobrescreve o cancelamento."""
        gate = asyncio.Event()
        adapter = FakeBankAdapter("itau", gate=gate)
        service = _service(flow_store, _fake_registry(adapter), proposal_lookup)

        first = asyncio.create_task(service.start(64, "itau"))
        while not adapter.submitted:
            await asyncio.sleep(0)
        queued = asyncio.create_task(service.start(64, "itau"))
        await asyncio.sleep(0)

        await service.cancel(64)
        gate.set()
        await asyncio.gather(first, queued)

        state = await flow_store.load_async(64)
        assert state is not None
        assert state.step == FlowStep.FAILED
        assert adapter.submitted == [64]

    @pytest.mark.asyncio
    async def test_cancel_wins_over_polling_decision(
        self,
        flow_store: MemoryFlowStore,
        adapter_registry: AdapterRegistry,
        proposal_lookup: MemoryProposalLookup,
    ) -> None:
        """Cancel entre a leitura e a escrita do polling prevalece."""
        service = _service(flow_store, adapter_registry, proposal_lookup, draws=[0.99])
        await service.start(65, "itau")

        paused = asyncio.Event()
        release = asyncio.Event()
        original_load = flow_store.load_async
        calls = 0

        async def pausing_load(proposal_id: int) -> FlowState | None:
            nonlocal calls
            calls += 1
            state = await original_load(proposal_id)
            if calls == 1:
                paused.set()
                await release.wait()
            return state

        flow_store.load_async = pausing_load  # type: ignore[method-assign]

        task = asyncio.create_task(service.get_summary(65))
        await paused.wait()
        await service.cancel(65)
        release.set()
        summary = await task

        assert summary.flow_step == "failed"
        assert summary.current_status == "rejected"
        state = await original_load(65)
        assert state is not None
        assert state.step == FlowStep.FAILED


@pytest.mark.asyncio
async def test_state_ttl_is_forwarded_to_store(
    adapter_registry: AdapterRegistry,
    proposal_lookup: MemoryProposalLookup,
) -> None:
    store = MagicMock()
    store.save_async = AsyncMock()
    store.load_async = AsyncMock(return_value=None)
    service = AuthorizationFlowService(
        flow_store=store,
        adapter_registry=adapter_registry,
        proposal_lookup=proposal_lookup,
        state_ttl_seconds=120,
    )

    await service.start(70, "itau")

    assert store.save_async.await_count == 2
    for call in store.save_async.await_args_list:
        assert call.args[1] == 120
