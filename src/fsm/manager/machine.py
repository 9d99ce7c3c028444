"""
Máquina de etapas (FlowStateMachine) do fluxo de autorização.

Valida transições normais contra o grafo e os guards, aplica
transições forçadas (cancelamento) e mantém histórico da execução
corrente para observabilidade.
"""

from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.flow import FlowStep, is_terminal
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StepTransition, TransitionResult


class FlowStateMachine:
    """
    Máquina de etapas para um fluxo de proposta.

    Não persiste nada: o orquestrador carrega a etapa do FlowStore,
    aplica a transição aqui e grava o resultado.

    Attributes:
        current_step: Etapa atual (None = não iniciado)
        history: Transições aplicadas nesta instância
    """

    __slots__ = ("_current_step", "_history", "_proposal_id")

    def __init__(
        self,
        initial_step: FlowStep | None = None,
        proposal_id: int | None = None,
    ) -> None:
        self._current_step = initial_step
        self._history: list[StepTransition] = []
        self._proposal_id = proposal_id

    @property
    def current_step(self) -> FlowStep | None:
        return self._current_step

    @property
    def history(self) -> list[StepTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def proposal_id(self) -> int | None:
        return self._proposal_id

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self._current_step)

    def get_valid_targets(self) -> frozenset[FlowStep]:
        return get_valid_targets(self._current_step)

    def transition(
        self,
        target: FlowStep,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta uma transição normal.

        Args:
            target: Etapa de destino
            trigger: Gatilho (ex: 'validation', 'bank_submission', 'poll')
            metadata: Dados para observabilidade (nunca PII)

        Returns:
            TransitionResult com sucesso/falha
        """
        current_name = self._current_step.name if self._current_step else "NOT_STARTED"
        if not is_transition_valid(self._current_step, target):
            return TransitionResult(
                success=False,
                error_reason=f"Transição inválida: {current_name} → {target.name}",
            )

        guard_result: GuardResult = evaluate_guards(self._current_step, target)
        if not guard_result.allowed:
            return TransitionResult(success=False, error_reason=guard_result.reason)

        return TransitionResult(
            success=True,
            transition=self._apply(target, trigger, metadata, forced=False),
        )

    def force(
        self,
        target: FlowStep,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> StepTransition:
        """
        Aplica transição ignorando grafo e guards.

        Usado pelo cancelamento, que sempre leva a FAILED.
        """
        return self._apply(target, trigger, metadata, forced=True)

    def get_state_summary(self) -> dict[str, Any]:
        """Resumo seguro para logs."""
        return {
            "proposal_id": self._proposal_id,
            "current_step": self._current_step.value if self._current_step else None,
            "is_terminal": self.is_terminal,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.value for s in self.get_valid_targets()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        return [t.to_log_dict() for t in self._history]

    def _apply(
        self,
        target: FlowStep,
        trigger: str,
        metadata: dict[str, Any] | None,
        *,
        forced: bool,
    ) -> StepTransition:
        transition = StepTransition(
            from_step=self._current_step,
            to_step=target,
            trigger=trigger,
            metadata=metadata or {},
            forced=forced,
        )
        self._current_step = target
        self._history.append(transition)
        return transition


def create_fsm(
    proposal_id: int,
    initial_step: FlowStep | None = None,
) -> FlowStateMachine:
    """Factory de FlowStateMachine."""
    return FlowStateMachine(initial_step=initial_step, proposal_id=proposal_id)
