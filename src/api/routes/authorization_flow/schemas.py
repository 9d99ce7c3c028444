"""Schemas HTTP do fluxo de autorização (camelCase no fio)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.domain.flow import BankResponse, FlowSummary, ValidationResult


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StartAuthorizationRequest(CamelModel):
    """Corpo do POST de início: código do banco escolhido."""

    bank_code: str = Field(min_length=1)

    @field_validator("bank_code")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("bankCode não pode ser vazio")
        return stripped


class ValidationResultSchema(CamelModel):
    eligible: bool
    score: int
    errors: list[str]
    warnings: list[str]
    recommendations: list[str]

    @classmethod
    def from_domain(cls, result: ValidationResult) -> ValidationResultSchema:
        return cls(
            eligible=result.eligible,
            score=result.score,
            errors=list(result.errors),
            warnings=list(result.warnings),
            recommendations=list(result.recommendations),
        )


class BankResponseSchema(CamelModel):
    success: bool
    external_id: str | None = None
    error: str | None = None

    @classmethod
    def from_domain(cls, response: BankResponse) -> BankResponseSchema:
        return cls(
            success=response.success,
            external_id=response.external_id,
            error=response.error,
        )


class FlowSummaryResponse(CamelModel):
    """Resumo do fluxo; success/validationResult/bankResponse só no start."""

    proposal_id: int
    client_name: str
    product_name: str
    requested_amount: float
    current_status: str
    flow_step: str
    validation_score: int
    validation_eligible: bool
    errors: list[str]
    warnings: list[str]
    recommendations: list[str]
    timestamp: datetime
    success: bool | None = None
    validation_result: ValidationResultSchema | None = None
    bank_response: BankResponseSchema | None = None

    @classmethod
    def from_summary(cls, summary: FlowSummary) -> FlowSummaryResponse:
        return cls(
            proposal_id=summary.proposal_id,
            client_name=summary.client_name,
            product_name=summary.product_name,
            requested_amount=summary.requested_amount,
            current_status=summary.current_status,
            flow_step=summary.flow_step,
            validation_score=summary.validation_score,
            validation_eligible=summary.validation_eligible,
            errors=list(summary.errors),
            warnings=list(summary.warnings),
            recommendations=list(summary.recommendations),
            timestamp=summary.timestamp,
            success=summary.success,
            validation_result=(
                ValidationResultSchema.from_domain(summary.validation_result)
                if summary.validation_result
                else None
            ),
            bank_response=(
                BankResponseSchema.from_domain(summary.bank_response)
                if summary.bank_response
                else None
            ),
        )


class CancelResponse(BaseModel):
    message: str
