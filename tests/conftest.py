"""Configuração do pytest para o serviço de fluxo de autorização."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from app.bootstrap import initialize_test_app  # noqa: E402
from app.infra.banks import AdapterRegistry, UnknownBankPolicy, default_adapters  # noqa: E402
from app.infra.proposals import MemoryProposalLookup  # noqa: E402
from app.infra.stores import MemoryFlowStore  # noqa: E402


@pytest.fixture
def flow_store() -> MemoryFlowStore:
    return MemoryFlowStore()


@pytest.fixture
def proposal_lookup() -> MemoryProposalLookup:
    return MemoryProposalLookup()


@pytest.fixture
def adapter_registry() -> AdapterRegistry:
    """Registry com os bancos simulados sem latência."""
    return AdapterRegistry(
        default_adapters(latency_seconds=0),
        default_bank_code="bradesco",
        policy=UnknownBankPolicy.FALLBACK_TO_DEFAULT,
    )


@pytest.fixture(scope="session", autouse=True)
def _test_logging() -> None:
    """Logs legíveis (sem JSON) durante os testes."""
    initialize_test_app()
