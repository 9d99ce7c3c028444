"""Testes HTTP do catálogo de bancos."""

from __future__ import annotations

from fastapi.testclient import TestClient

from app.app import create_app
from app.bootstrap import get_adapter_registry
from app.infra.banks import AdapterRegistry, default_adapters
from tests.fakes.fake_banks import FakeBankAdapter


def test_supported_banks_lists_default_banks() -> None:
    app = create_app()
    registry = AdapterRegistry(default_adapters(latency_seconds=0), default_bank_code="bradesco")
    app.dependency_overrides[get_adapter_registry] = lambda: registry

    response = TestClient(app).get("/bank-integration/supported-banks")

    assert response.status_code == 200
    assert response.json() == {"banks": ["bradesco", "itau", "bb"]}


def test_supported_banks_reflects_registry() -> None:
    app = create_app()
    registry = AdapterRegistry([FakeBankAdapter("caixa")], default_bank_code="caixa")
    app.dependency_overrides[get_adapter_registry] = lambda: registry

    response = TestClient(app).get("/bank-integration/supported-banks")

    assert response.json() == {"banks": ["caixa"]}
