"""Modelos do fluxo de autorização: validação, resposta do banco e estado.

FlowState é a unidade guardada no FlowStore (uma por proposta).
Todos os modelos serializam para dict (to_dict/from_dict) para
permitir backends de store além da memória.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

from fsm.states import FlowStep

MIN_SCORE = 0
MAX_SCORE = 100
ELIGIBILITY_THRESHOLD = 50


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Veredito de elegibilidade de crédito.

    Invariantes:
        - 0 <= score <= 100
        - eligible == (score >= 50 and not errors)
    """

    eligible: bool
    score: int
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not MIN_SCORE <= self.score <= MAX_SCORE:
            raise ValueError(f"score deve estar entre 0 e 100, recebido: {self.score}")
        expected = self.score >= ELIGIBILITY_THRESHOLD and not self.errors
        if self.eligible != expected:
            raise ValueError("eligible inconsistente com score/errors")

    def to_dict(self) -> dict[str, Any]:
        return {
            "eligible": self.eligible,
            "score": self.score,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationResult:
        return cls(
            eligible=bool(data.get("eligible", False)),
            score=int(data.get("score", 0)),
            errors=list(data.get("errors", [])),
            warnings=list(data.get("warnings", [])),
            recommendations=list(data.get("recommendations", [])),
        )


@dataclass(frozen=True, slots=True)
class BankResponse:
    """Resposta de submissão a um banco.

    external_id presente sse success; error presente sse não success.
    """

    success: bool
    external_id: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.success and (not self.external_id or self.error is not None):
            raise ValueError("Resposta de sucesso exige external_id e nenhum error")
        if not self.success and (not self.error or self.external_id is not None):
            raise ValueError("Resposta de falha exige error e nenhum external_id")

    @classmethod
    def accepted(cls, external_id: str) -> BankResponse:
        return cls(success=True, external_id=external_id)

    @classmethod
    def rejected(cls, error: str) -> BankResponse:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success}
        if self.external_id is not None:
            data["external_id"] = self.external_id
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BankResponse:
        return cls(
            success=bool(data.get("success", False)),
            external_id=data.get("external_id"),
            error=data.get("error"),
        )


@dataclass(frozen=True, slots=True)
class BankStatus:
    """Status de uma proposta consultado no banco."""

    status: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> str:
        return str(self.details.get("message", ""))


@dataclass(frozen=True, slots=True)
class FlowState:
    """Estado corrente do fluxo de uma proposta.

    Atributos:
        proposal_id: Proposta dona do estado
        step: Etapa atual do fluxo
        validation_result: Veredito de validação (quando já executada)
        bank_response: Resposta da submissão (quando já executada)
        bank_code: Código de banco pedido em start()
        updated_at: Última escrita (UTC)
    """

    proposal_id: int
    step: FlowStep
    validation_result: ValidationResult | None = None
    bank_response: BankResponse | None = None
    bank_code: str | None = None
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def with_step(self, step: FlowStep, **changes: Any) -> FlowState:
        """Nova versão com outra etapa, preservando os demais campos."""
        return replace(self, step=step, updated_at=datetime.now(UTC), **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "proposal_id": self.proposal_id,
            "step": self.step.value,
            "validation_result": (
                self.validation_result.to_dict() if self.validation_result else None
            ),
            "bank_response": self.bank_response.to_dict() if self.bank_response else None,
            "bank_code": self.bank_code,
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlowState:
        validation = data.get("validation_result")
        bank_response = data.get("bank_response")
        return cls(
            proposal_id=int(data["proposal_id"]),
            step=FlowStep(data["step"]),
            validation_result=ValidationResult.from_dict(validation) if validation else None,
            bank_response=BankResponse.from_dict(bank_response) if bank_response else None,
            bank_code=data.get("bank_code"),
            updated_at=(
                datetime.fromisoformat(data["updated_at"])
                if data.get("updated_at")
                else datetime.now(UTC)
            ),
        )


@dataclass(frozen=True, slots=True)
class FlowSummary:
    """Resumo do fluxo devolvido aos chamadores (polling/start).

    success, validation_result e bank_response só são preenchidos pelo
    start(); o resumo de consulta não expõe os objetos brutos.
    """

    proposal_id: int
    client_name: str
    product_name: str
    requested_amount: float
    current_status: str
    flow_step: str
    validation_score: int
    validation_eligible: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    success: bool | None = None
    validation_result: ValidationResult | None = None
    bank_response: BankResponse | None = None
