"""
Módulo FSM: etapas do fluxo de autorização de propostas.

Estrutura:
    - states/: Etapas (FlowStep enum)
    - transitions/: Grafo de transições (VALID_TRANSITIONS)
    - rules/: Guards
    - manager/: Máquina de etapas (FlowStateMachine)
    - types/: StepTransition, TransitionResult

Grafo:
    (não iniciado) → validation_ok | failed
    validation_ok → awaiting_response | failed
    awaiting_response → completed | failed
    cancelamento: qualquer etapa → failed (forçado)
"""

from fsm.manager import (
    FlowStateMachine,
    create_fsm,
)
from fsm.rules import (
    GuardResult,
    evaluate_guards,
)
from fsm.states import (
    ENTRY_STEPS,
    TERMINAL_STEPS,
    UNKNOWN_STEP,
    FlowStep,
    is_terminal,
    is_valid_step,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import (
    StepTransition,
    TransitionResult,
)

__all__ = [
    "ENTRY_STEPS",
    "TERMINAL_STEPS",
    "UNKNOWN_STEP",
    "VALID_TRANSITIONS",
    "FlowStateMachine",
    "FlowStep",
    "GuardResult",
    "StepTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "is_valid_step",
    "validate_transition_map",
]
