"""
Etapas canônicas do fluxo de autorização de uma proposta.

A ausência de FlowState no store é o estado inicial implícito
("não iniciado"); não existe etapa armazenada para ele.
"""

from enum import StrEnum


class FlowStep(StrEnum):
    """
    Etapas do fluxo de autorização.

    Etapas não-terminais:
        - VALIDATION_OK: Proposta elegível, submissão ao banco em curso
        - AWAITING_RESPONSE: Submetida ao banco, aguardando decisão

    Etapas terminais:
        - COMPLETED: Banco aprovou a proposta
        - FAILED: Inelegível, recusada pelo banco ou cancelada
    """

    VALIDATION_OK = "validation_ok"
    AWAITING_RESPONSE = "awaiting_response"
    COMPLETED = "completed"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


# Terminal: só o cancelamento (forçado) sai daqui; start() recomeça do zero
TERMINAL_STEPS: frozenset[FlowStep] = frozenset({
    FlowStep.COMPLETED,
    FlowStep.FAILED,
})

# Etapas alcançáveis a partir do estado implícito "não iniciado"
ENTRY_STEPS: frozenset[FlowStep] = frozenset({
    FlowStep.VALIDATION_OK,
    FlowStep.FAILED,
})

# Valor exposto no resumo quando não há FlowState
UNKNOWN_STEP = "unknown"


def is_terminal(step: FlowStep | None) -> bool:
    """Verifica se a etapa é terminal. None (não iniciado) não é."""
    return step in TERMINAL_STEPS


def is_valid_step(step: object) -> bool:
    """Verifica se o valor é uma FlowStep válida."""
    return isinstance(step, FlowStep)
