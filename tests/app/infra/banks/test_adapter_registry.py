"""Testes do AdapterRegistry e da política para bancos desconhecidos."""

from __future__ import annotations

import logging

import pytest

from app.infra.banks import AdapterRegistry, UnknownBankPolicy, default_adapters
from tests.fakes.fake_banks import FakeBankAdapter
from utils.errors import UnknownBankCodeError


class TestResolve:
    def test_known_codes(self, adapter_registry: AdapterRegistry) -> None:
        for code in ("bradesco", "itau", "bb"):
            assert adapter_registry.resolve(code).bank_code == code

    @pytest.mark.parametrize("code", ["unknown-code", "", "BRADESCO", "santander"])
    def test_unknown_code_falls_back_to_default(
        self, adapter_registry: AdapterRegistry, code: str
    ) -> None:
        adapter = adapter_registry.resolve(code)
        assert adapter.bank_code == "bradesco"

    def test_fallback_is_logged(
        self, adapter_registry: AdapterRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="app.infra.banks.registry"):
            adapter_registry.resolve("nubank")

        messages = [r.getMessage() for r in caplog.records]
        assert "adapter_fallback_used" in messages
        assert "Fallback applied for adapter_registry" in messages
        fallback = next(r for r in caplog.records if r.getMessage() == "adapter_fallback_used")
        assert fallback.requested_bank_code == "nubank"

    def test_reject_policy_raises(self) -> None:
        registry = AdapterRegistry(
            default_adapters(latency_seconds=0),
            default_bank_code="bradesco",
            policy=UnknownBankPolicy.REJECT,
        )

        with pytest.raises(UnknownBankCodeError) as exc_info:
            registry.resolve("nubank")

        assert exc_info.value.bank_code == "nubank"
        assert exc_info.value.supported == ["bradesco", "itau", "bb"]
        assert registry.resolve("itau").bank_code == "itau"

    def test_policy_accepts_plain_string(self) -> None:
        registry = AdapterRegistry(
            default_adapters(latency_seconds=0), default_bank_code="bb", policy="reject"
        )
        assert registry.policy is UnknownBankPolicy.REJECT
        assert registry.default_bank_code == "bb"


class TestConstruction:
    def test_supported_banks_in_registration_order(self, adapter_registry: AdapterRegistry) -> None:
        assert adapter_registry.supported_banks() == ["bradesco", "itau", "bb"]
        assert adapter_registry.is_supported("itau")
        assert not adapter_registry.is_supported("nubank")

    def test_duplicate_code_rejected(self) -> None:
        with pytest.raises(ValueError, match="duplicado"):
            AdapterRegistry([FakeBankAdapter("x"), FakeBankAdapter("x")], default_bank_code="x")

    def test_default_must_be_registered(self) -> None:
        with pytest.raises(ValueError, match="padrão"):
            AdapterRegistry([FakeBankAdapter("x")], default_bank_code="y")
