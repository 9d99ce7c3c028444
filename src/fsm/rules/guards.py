"""
Guards para transições de etapa do fluxo.

Guards bloqueiam transições normais; transições forçadas
(cancelamento) não são avaliadas aqui.
"""

from collections.abc import Callable

from fsm.states.flow import TERMINAL_STEPS, FlowStep


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        return cls(allowed=False, reason=reason)


Guard = Callable[[FlowStep | None, FlowStep], GuardResult]


def guard_valid_step(from_step: FlowStep | None, to_step: FlowStep) -> GuardResult:
    """Guard: origem (quando existe) e destino devem ser FlowStep."""
    if from_step is not None and not isinstance(from_step, FlowStep):
        return GuardResult.deny(f"Etapa de origem inválida: {from_step}")

    if not isinstance(to_step, FlowStep):
        return GuardResult.deny(f"Etapa de destino inválida: {to_step}")

    return GuardResult.allow()


def guard_terminal_step(from_step: FlowStep | None, to_step: FlowStep) -> GuardResult:
    """Guard: etapas terminais não permitem saída normal."""
    if from_step in TERMINAL_STEPS:
        return GuardResult.deny(
            f"Etapa {from_step.name} é terminal, não permite transição"
        )
    return GuardResult.allow()


def guard_same_step(from_step: FlowStep | None, to_step: FlowStep) -> GuardResult:
    """Guard: transições reflexivas não existem no fluxo."""
    if from_step == to_step:
        return GuardResult.deny(
            f"Transição reflexiva não permitida: {to_step.name} → {to_step.name}"
        )
    return GuardResult.allow()


# Aplicados em ordem; o primeiro deny interrompe
DEFAULT_GUARDS: list[Guard] = [
    guard_valid_step,
    guard_terminal_step,
    guard_same_step,
]


def evaluate_guards(
    from_step: FlowStep | None,
    to_step: FlowStep,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia guards para uma transição.

    Returns:
        GuardResult do primeiro guard que negar, ou allow()
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_step, to_step)
        if not result.allowed:
            return result

    return GuardResult.allow()
