"""
Tipos para representar transições de etapa do fluxo.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.states.flow import FlowStep


@dataclass(frozen=True, slots=True)
class StepTransition:
    """
    Registro imutável de uma mudança de etapa.

    Attributes:
        from_step: Etapa de origem (None = fluxo não iniciado)
        to_step: Etapa de destino
        trigger: Gatilho (ex: 'start', 'bank_submission', 'cancel')
        metadata: Dados para observabilidade (nunca PII)
        timestamp: Momento da transição (UTC)
        forced: True para cancelamento, que ignora o grafo
    """

    from_step: FlowStep | None
    to_step: FlowStep
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(UTC)
    )
    forced: bool = False

    def __post_init__(self) -> None:
        if not self.trigger or not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")

    def to_log_dict(self) -> dict[str, Any]:
        """Representação segura para logs."""
        return {
            "from_step": self.from_step.value if self.from_step else None,
            "to_step": self.to_step.value,
            "trigger": self.trigger,
            "timestamp": self.timestamp.isoformat(),
            "forced": self.forced,
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """
    Resultado de uma tentativa de transição.

    Attributes:
        success: Se a transição foi aplicada
        transition: Registro da transição (se success=True)
        error_reason: Motivo da recusa (se success=False)
    """

    success: bool
    transition: StepTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.transition is None:
            raise ValueError("Transição bem-sucedida deve incluir transition")
        if not self.success and self.error_reason is None:
            raise ValueError("Transição falha deve incluir error_reason")
