"""Orquestrador do fluxo de autorização de propostas.

Encadeia validação de crédito → resolução do banco → submissão e
mantém o FlowState de cada proposta no FlowStore.

Regras de concorrência (por proposta):
- start() roda inteiro sob o lock da proposta (no máximo um em voo)
- get_summary()/advance() fazem leitura → decisão → escrita sob o lock
- cancel() não espera o lock: invalida o epoch e grava FAILED na hora;
  quem estava segurando ou esperando o lock não sobrescreve o cancelamento

Falhas de negócio (inelegível, recusa do banco) viram dados no estado,
nunca exceção.
"""

from __future__ import annotations

import logging
import random
import time
from enum import StrEnum
from typing import TYPE_CHECKING

from app.domain.flow import FlowState, FlowSummary
from app.domain.proposal import ProposalStatus
from app.observability import (
    get_correlation_id,
    record_bank_submission,
    record_flow_transition,
    record_latency,
)
from app.protocols.flow_store import DEFAULT_FLOW_TTL_SECONDS
from app.services.credit_validation import CreditValidationService
from app.services.keyed_lock import KeyedLock
from fsm import UNKNOWN_STEP, FlowStep, create_fsm

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.proposal import Proposal
    from app.infra.banks.registry import AdapterRegistry
    from app.protocols.flow_store import FlowStoreProtocol
    from app.protocols.proposal_lookup import ProposalLookupProtocol
    from fsm import FlowStateMachine

logger = logging.getLogger(__name__)

COMPONENT = "authorization_flow"
DEFAULT_COMPLETION_THRESHOLD = 0.6
CANCEL_MESSAGE = "Fluxo cancelado com sucesso"

STEP_STATUS: dict[FlowStep, ProposalStatus] = {
    FlowStep.COMPLETED: ProposalStatus.APPROVED,
    FlowStep.AWAITING_RESPONSE: ProposalStatus.IN_ANALYSIS,
    FlowStep.FAILED: ProposalStatus.REJECTED,
}

BANK_STATUS_STEP: dict[str, FlowStep] = {
    "APPROVED": FlowStep.COMPLETED,
    "REJECTED": FlowStep.FAILED,
    "DENIED": FlowStep.FAILED,
}


class FlowProgressMode(StrEnum):
    """Origem da decisão de avanço durante o polling do resumo."""

    RANDOM = "random"
    BANK_STATUS = "bank_status"


def current_status_for(step: FlowStep | None) -> ProposalStatus:
    """Status de negócio exposto para a etapa (OPEN sem estado)."""
    if step is None:
        return ProposalStatus.OPEN
    return STEP_STATUS.get(step, ProposalStatus.OPEN)


def build_summary(
    proposal: Proposal,
    state: FlowState | None,
    *,
    success: bool | None = None,
    include_raw: bool = False,
) -> FlowSummary:
    """Monta o resumo a partir da proposta e do estado (opcional).

    Sem estado, usa os padrões: score 0, listas vazias, etapa 'unknown'.
    """
    validation = state.validation_result if state else None
    return FlowSummary(
        proposal_id=proposal.id,
        client_name=proposal.client.name,
        product_name=proposal.product_name,
        requested_amount=proposal.requested_amount,
        current_status=current_status_for(state.step if state else None).value,
        flow_step=state.step.value if state else UNKNOWN_STEP,
        validation_score=validation.score if validation else 0,
        validation_eligible=validation.eligible if validation else False,
        errors=list(validation.errors) if validation else [],
        warnings=list(validation.warnings) if validation else [],
        recommendations=list(validation.recommendations) if validation else [],
        success=success,
        validation_result=validation if include_raw else None,
        bank_response=state.bank_response if include_raw and state else None,
    )


class AuthorizationFlowService:
    """Orquestra o fluxo de autorização de uma proposta.

    Args:
        flow_store: Store de FlowState por proposta
        adapter_registry: Registry de adapters de banco
        proposal_lookup: Serviço externo de propostas
        validator: Motor de validação de crédito
        random_source: Sorteio em [0, 1) usado no avanço aleatório
        completion_threshold: Sorteio acima deste valor conclui o fluxo
        progress_mode: Como get_summary decide o avanço
        state_ttl_seconds: TTL gravado em cada escrita do estado
        locks: Locks por proposta (compartilháveis entre instâncias)
    """

    def __init__(
        self,
        *,
        flow_store: FlowStoreProtocol,
        adapter_registry: AdapterRegistry,
        proposal_lookup: ProposalLookupProtocol,
        validator: CreditValidationService | None = None,
        random_source: Callable[[], float] = random.random,
        completion_threshold: float = DEFAULT_COMPLETION_THRESHOLD,
        progress_mode: FlowProgressMode | str = FlowProgressMode.RANDOM,
        state_ttl_seconds: int = DEFAULT_FLOW_TTL_SECONDS,
        locks: KeyedLock | None = None,
    ) -> None:
        self._store = flow_store
        self._registry = adapter_registry
        self._lookup = proposal_lookup
        self._validator = validator or CreditValidationService()
        self._random = random_source
        self._threshold = completion_threshold
        self._progress_mode = FlowProgressMode(progress_mode)
        self._ttl = state_ttl_seconds
        self._locks = locks or KeyedLock()

    @property
    def progress_mode(self) -> FlowProgressMode:
        return self._progress_mode

    def supported_banks(self) -> list[str]:
        return self._registry.supported_banks()

    async def start(self, proposal_id: int, bank_code: str) -> FlowSummary:
        """Inicia (ou reinicia) o fluxo da proposta.

        Raises:
            ProposalNotFoundError: Proposta inexistente
            UnknownBankCodeError: Código desconhecido com política reject
        """
        started = time.perf_counter()
        epoch = self._locks.epoch(proposal_id)
        async with self._locks.hold(proposal_id):
            proposal = await self._lookup.get_proposal(proposal_id)
            adapter = self._registry.resolve(bank_code)

            # start é reentrante: máquina nova, sem a etapa anterior
            machine = create_fsm(proposal_id)
            validation = self._validator.validate(proposal)

            logger.info(
                "flow_started",
                extra={
                    "proposal_id": proposal_id,
                    "bank_code": adapter.bank_code,
                    "requested_bank_code": bank_code,
                    "score": validation.score,
                    "eligible": validation.eligible,
                },
            )

            if not validation.eligible:
                if not self._transition(machine, FlowStep.FAILED, "validation"):
                    return await self._current_summary(proposal, started)
                state = FlowState(
                    proposal_id=proposal_id,
                    step=FlowStep.FAILED,
                    validation_result=validation,
                    bank_code=bank_code,
                )
                logger.info(
                    "flow_validation_failed",
                    extra={
                        "proposal_id": proposal_id,
                        "score": validation.score,
                        "error_count": len(validation.errors),
                    },
                )
                return await self._finish_start(
                    proposal, machine, state, None, epoch, success=False, started=started
                )

            if not self._transition(machine, FlowStep.VALIDATION_OK, "validation"):
                return await self._current_summary(proposal, started)
            state = FlowState(
                proposal_id=proposal_id,
                step=FlowStep.VALIDATION_OK,
                validation_result=validation,
                bank_code=bank_code,
            )
            if not await self._save_if_current(state, None, epoch, "validation"):
                return await self._current_summary(proposal, started)

            submit_started = time.perf_counter()
            bank_response = await adapter.submit_proposal(proposal)
            submit_ms = (time.perf_counter() - submit_started) * 1000
            record_bank_submission(
                adapter.bank_code, bank_response.success, submit_ms, get_correlation_id()
            )

            target = FlowStep.AWAITING_RESPONSE if bank_response.success else FlowStep.FAILED
            if not self._transition(machine, target, "bank_submission"):
                return await self._current_summary(proposal, started)
            logger.info(
                "bank_submission_completed",
                extra={
                    "proposal_id": proposal_id,
                    "bank_code": adapter.bank_code,
                    "success": bank_response.success,
                    "external_id": bank_response.external_id,
                },
            )
            return await self._finish_start(
                proposal,
                machine,
                state.with_step(target, bank_response=bank_response),
                FlowStep.VALIDATION_OK,
                epoch,
                success=bank_response.success,
                started=started,
            )

    async def get_summary(self, proposal_id: int) -> FlowSummary:
        """Resumo atual; pode concluir um fluxo em aguardo.

        Só altera a etapa quando ela é exatamente AWAITING_RESPONSE.
        """
        started = time.perf_counter()
        epoch = self._locks.epoch(proposal_id)
        async with self._locks.hold(proposal_id):
            proposal = await self._lookup.get_proposal(proposal_id)
            state = await self._store.load_async(proposal_id)

            if state is not None and state.step == FlowStep.AWAITING_RESPONSE:
                if self._progress_mode is FlowProgressMode.BANK_STATUS:
                    target = await self._target_from_bank(state)
                else:
                    target = FlowStep.COMPLETED if self._random() > self._threshold else None
                state = await self._advance_state(state, target, "poll", epoch)

        record_latency(COMPONENT, "get_summary", (time.perf_counter() - started) * 1000)
        return build_summary(proposal, state)

    async def advance(self, proposal_id: int) -> FlowSummary:
        """Avança um fluxo em aguardo consultando o status no banco.

        APPROVED conclui; REJECTED/DENIED falha; demais status mantêm.
        """
        epoch = self._locks.epoch(proposal_id)
        async with self._locks.hold(proposal_id):
            proposal = await self._lookup.get_proposal(proposal_id)
            state = await self._store.load_async(proposal_id)

            if state is not None and state.step == FlowStep.AWAITING_RESPONSE:
                target = await self._target_from_bank(state)
                state = await self._advance_state(state, target, "bank_status", epoch)

        return build_summary(proposal, state)

    async def cancel(self, proposal_id: int) -> dict[str, str]:
        """Força FAILED imediatamente, preservando os demais campos."""
        self._locks.invalidate(proposal_id)

        previous = await self._store.load_async(proposal_id)
        from_step = previous.step if previous else None
        if previous is None:
            state = FlowState(proposal_id=proposal_id, step=FlowStep.FAILED)
        else:
            state = previous.with_step(FlowStep.FAILED)

        machine = create_fsm(proposal_id, from_step)
        machine.force(FlowStep.FAILED, "cancel", {"preserved": previous is not None})
        await self._store.save_async(state, self._ttl)

        record_flow_transition(proposal_id, from_step, FlowStep.FAILED.value, "cancel")
        logger.info(
            "flow_cancelled",
            extra={
                "proposal_id": proposal_id,
                "from_step": from_step.value if from_step else None,
                "transitions": machine.get_history_summary(),
            },
        )
        return {"message": CANCEL_MESSAGE}

    async def _target_from_bank(self, state: FlowState) -> FlowStep | None:
        external_id = state.bank_response.external_id if state.bank_response else None
        if not external_id:
            return None

        adapter = self._registry.resolve(state.bank_code or self._registry.default_bank_code)
        bank_status = await adapter.get_proposal_status(external_id)
        return BANK_STATUS_STEP.get(bank_status.status.upper())

    async def _advance_state(
        self,
        state: FlowState,
        target: FlowStep | None,
        trigger: str,
        epoch: int,
    ) -> FlowState:
        if target is None:
            return state

        machine = create_fsm(state.proposal_id, state.step)
        if not self._transition(machine, target, trigger):
            return state

        advanced = state.with_step(target)
        if not await self._save_if_current(advanced, state.step, epoch, trigger):
            current = await self._store.load_async(state.proposal_id)
            return current or state

        logger.info(
            "flow_advanced",
            extra={
                "proposal_id": state.proposal_id,
                "to_step": target.value,
                "trigger": trigger,
            },
        )
        return advanced

    async def _save_if_current(
        self,
        state: FlowState,
        from_step: FlowStep | None,
        epoch: int,
        trigger: str,
    ) -> bool:
        """Grava o estado se nenhum cancel ocorreu desde o snapshot do epoch."""
        if self._locks.epoch(state.proposal_id) != epoch:
            logger.info(
                "flow_write_superseded",
                extra={"proposal_id": state.proposal_id, "step": state.step.value},
            )
            return False

        await self._store.save_async(state, self._ttl)
        record_flow_transition(
            state.proposal_id,
            from_step.value if from_step else None,
            state.step.value,
            trigger,
            get_correlation_id(),
        )
        return True

    def _transition(self, machine: FlowStateMachine, target: FlowStep, trigger: str) -> bool:
        """Aplica a transição na máquina; False (com log) se o grafo ou um guard negar."""
        result = machine.transition(target, trigger)
        if result.success:
            return True

        logger.warning(
            "flow_transition_rejected",
            extra={
                "proposal_id": machine.proposal_id,
                "trigger": trigger,
                "reason": result.error_reason,
                "state": machine.get_state_summary(),
            },
        )
        return False

    async def _finish_start(
        self,
        proposal: Proposal,
        machine: FlowStateMachine,
        state: FlowState,
        from_step: FlowStep | None,
        epoch: int,
        *,
        success: bool,
        started: float,
    ) -> FlowSummary:
        trigger = "validation" if state.bank_response is None else "bank_submission"
        if not await self._save_if_current(state, from_step, epoch, trigger):
            return await self._current_summary(proposal, started)

        logger.info(
            "flow_start_finished",
            extra={
                "proposal_id": state.proposal_id,
                "step": state.step.value,
                "transitions": machine.get_history_summary(),
            },
        )
        record_latency(COMPONENT, "start", (time.perf_counter() - started) * 1000)
        return build_summary(proposal, state, success=success, include_raw=True)

    async def _current_summary(self, proposal: Proposal, started: float) -> FlowSummary:
        current = await self._store.load_async(proposal.id)
        record_latency(COMPONENT, "start", (time.perf_counter() - started) * 1000)
        return build_summary(proposal, current, success=False, include_raw=True)
