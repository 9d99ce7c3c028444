"""Validação determinística de crédito (sem IO).

Regras de pontuação (score parte de 100):
- Email ausente: -10 e alerta
- CPF ausente: -15 e alerta
- Valor abaixo de R$ 1.000: -100 e erro
- Valor acima de R$ 100.000: -20 e alerta

Elegível quando score >= 50 e nenhum erro. Recomenda documentação
adicional quando score < 70. Mesma entrada, mesmo resultado.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.flow import ELIGIBILITY_THRESHOLD, MIN_SCORE, ValidationResult

if TYPE_CHECKING:
    from app.domain.proposal import Proposal

logger = logging.getLogger(__name__)

INITIAL_SCORE = 100
MIN_REQUESTED_AMOUNT = 1000
HIGH_VALUE_AMOUNT = 100000
RECOMMENDATION_SCORE = 70

MISSING_EMAIL_PENALTY = 10
MISSING_CPF_PENALTY = 15
BELOW_MINIMUM_PENALTY = 100
HIGH_VALUE_PENALTY = 20

WARNING_MISSING_EMAIL = "Email não informado"
WARNING_MISSING_CPF = "CPF não informado"
ERROR_BELOW_MINIMUM = "Valor solicitado abaixo do mínimo de R$ 1.000"
WARNING_HIGH_VALUE = "Valor acima de R$ 100.000 requer análise adicional"
RECOMMENDATION_EXTRA_DOCS = "Considere solicitar documentação adicional"


def validate_proposal(proposal: Proposal) -> ValidationResult:
    """Pontua a proposta e decide a elegibilidade."""
    score = INITIAL_SCORE
    errors: list[str] = []
    warnings: list[str] = []

    if not proposal.client.email:
        score -= MISSING_EMAIL_PENALTY
        warnings.append(WARNING_MISSING_EMAIL)

    if not proposal.client.cpf:
        score -= MISSING_CPF_PENALTY
        warnings.append(WARNING_MISSING_CPF)

    if proposal.requested_amount < MIN_REQUESTED_AMOUNT:
        score -= BELOW_MINIMUM_PENALTY
        errors.append(ERROR_BELOW_MINIMUM)

    if proposal.requested_amount > HIGH_VALUE_AMOUNT:
        score -= HIGH_VALUE_PENALTY
        warnings.append(WARNING_HIGH_VALUE)

    score = max(MIN_SCORE, score)
    eligible = score >= ELIGIBILITY_THRESHOLD and not errors
    recommendations = [RECOMMENDATION_EXTRA_DOCS] if score < RECOMMENDATION_SCORE else []

    logger.debug(
        "credit_validation_scored",
        extra={
            "proposal_id": proposal.id,
            "score": score,
            "eligible": eligible,
            "error_count": len(errors),
            "warning_count": len(warnings),
        },
    )

    return ValidationResult(
        eligible=eligible,
        score=score,
        errors=errors,
        warnings=warnings,
        recommendations=recommendations,
    )


class CreditValidationService:
    """Serviço sem estado que expõe validate_proposal para injeção."""

    def validate(self, proposal: Proposal) -> ValidationResult:
        return validate_proposal(proposal)
