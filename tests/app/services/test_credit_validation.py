"""Testes do motor de validação de crédito."""

from __future__ import annotations

import pytest

from app.services.credit_validation import (
    ERROR_BELOW_MINIMUM,
    RECOMMENDATION_EXTRA_DOCS,
    WARNING_HIGH_VALUE,
    WARNING_MISSING_CPF,
    WARNING_MISSING_EMAIL,
    CreditValidationService,
    validate_proposal,
)
from tests.fakes.fake_banks import make_proposal


class TestValidateProposal:
    def test_complete_client_scores_100(self) -> None:
        result = validate_proposal(make_proposal(requested_amount=10000))

        assert result.score == 100
        assert result.eligible
        assert result.errors == []
        assert result.warnings == []
        assert result.recommendations == []

    def test_below_minimum_is_ineligible_with_zero_score(self) -> None:
        result = validate_proposal(make_proposal(requested_amount=500))

        assert result.score == 0
        assert not result.eligible
        assert result.errors == [ERROR_BELOW_MINIMUM]
        assert result.errors == ["Valor solicitado abaixo do mínimo de R$ 1.000"]
        assert result.recommendations == [RECOMMENDATION_EXTRA_DOCS]

    def test_high_value_without_cpf(self) -> None:
        result = validate_proposal(make_proposal(requested_amount=150000, cpf=None))

        assert result.score == 65
        assert result.eligible
        assert result.warnings == [WARNING_MISSING_CPF, WARNING_HIGH_VALUE]
        assert result.recommendations == ["Considere solicitar documentação adicional"]

    def test_missing_email_and_cpf(self) -> None:
        result = validate_proposal(make_proposal(email=None, cpf=None))

        assert result.score == 75
        assert result.eligible
        assert result.warnings == [WARNING_MISSING_EMAIL, WARNING_MISSING_CPF]
        assert result.recommendations == []

    def test_empty_strings_count_as_missing(self) -> None:
        result = validate_proposal(make_proposal(email="", cpf=""))
        assert result.score == 75

    def test_every_penalty_clamps_at_zero(self) -> None:
        result = validate_proposal(make_proposal(requested_amount=10, email=None, cpf=None))

        assert result.score == 0
        assert not result.eligible
        assert len(result.warnings) == 2

    @pytest.mark.parametrize(
        ("amount", "has_error", "has_high_warning"),
        [
            (999.99, True, False),
            (1000, False, False),
            (100000, False, False),
            (100000.01, False, True),
        ],
    )
    def test_amount_boundaries(self, amount: float, has_error: bool, has_high_warning: bool) -> None:
        result = validate_proposal(make_proposal(requested_amount=amount))

        assert (ERROR_BELOW_MINIMUM in result.errors) is has_error
        assert (WARNING_HIGH_VALUE in result.warnings) is has_high_warning

    def test_high_value_without_contact_data_stays_eligible_at_55(self) -> None:
        result = validate_proposal(make_proposal(requested_amount=200000, email=None, cpf=None))

        assert result.score == 55
        assert result.eligible
        assert result.recommendations == [RECOMMENDATION_EXTRA_DOCS]

    def test_deterministic(self) -> None:
        proposal = make_proposal(requested_amount=150000, cpf=None)
        assert validate_proposal(proposal) == validate_proposal(proposal)

    @pytest.mark.parametrize("amount", [0, 1, 999, 1000, 5000, 100000, 100001, 10**7])
    @pytest.mark.parametrize("email", [None, "a@b.c"])
    @pytest.mark.parametrize("cpf", [None, "1"])
    def test_invariants(self, amount: float, email: str | None, cpf: str | None) -> None:
        result = validate_proposal(make_proposal(requested_amount=amount, email=email, cpf=cpf))

        assert 0 <= result.score <= 100
        assert result.eligible == (result.score >= 50 and not result.errors)


def test_service_delegates_to_function() -> None:
    proposal = make_proposal(requested_amount=150000, cpf=None)
    assert CreditValidationService().validate(proposal) == validate_proposal(proposal)
