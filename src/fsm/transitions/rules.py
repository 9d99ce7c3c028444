"""
Regras de transição válidas entre etapas do fluxo de autorização.

O grafo cobre apenas transições normais. O cancelamento é forçado
(FlowStateMachine.force) e não passa por este mapa. Um start() novo
usa uma máquina sem etapa (None), então valida contra ENTRY_STEPS.
"""

from fsm.states.flow import ENTRY_STEPS, TERMINAL_STEPS, FlowStep

TransitionMap = dict[FlowStep, frozenset[FlowStep]]

# Chave: etapa de origem; valor: etapas de destino permitidas
VALID_TRANSITIONS: TransitionMap = {
    # Elegível: submissão ao banco aceita ou recusada
    FlowStep.VALIDATION_OK: frozenset({
        FlowStep.AWAITING_RESPONSE,
        FlowStep.FAILED,
    }),

    # Aguardando banco: aprovação ou recusa
    FlowStep.AWAITING_RESPONSE: frozenset({
        FlowStep.COMPLETED,
        FlowStep.FAILED,
    }),

    FlowStep.COMPLETED: frozenset(),
    FlowStep.FAILED: frozenset(),
}


def get_valid_targets(step: FlowStep | None) -> frozenset[FlowStep]:
    """
    Retorna as etapas de destino válidas.

    Args:
        step: Etapa de origem (None = fluxo não iniciado)

    Returns:
        Conjunto de destinos permitidos (vazio se terminal)
    """
    if step is None:
        return ENTRY_STEPS
    return VALID_TRANSITIONS.get(step, frozenset())


def is_transition_valid(from_step: FlowStep | None, to_step: FlowStep) -> bool:
    """Verifica se a transição é permitida pelo grafo."""
    if from_step in TERMINAL_STEPS:
        return False
    return to_step in get_valid_targets(from_step)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for step in FlowStep:
        if step not in VALID_TRANSITIONS:
            errors.append(f"Etapa {step.name} ausente em VALID_TRANSITIONS")

    for step in TERMINAL_STEPS:
        targets = VALID_TRANSITIONS.get(step, frozenset())
        if targets:
            errors.append(
                f"Etapa terminal {step.name} não deveria ter transições: {targets}"
            )

    for from_step, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if not isinstance(target, FlowStep):
                errors.append(f"Transição {from_step.name} → {target}: destino inválido")

    return errors
