"""Bancos: adapters simulados e registry de resolução.

Módulos disponíveis:
    - base: SimulatedBankAdapter (latência + id externo PREFIXO_<ms>)
    - bradesco, itau, bb: constantes de cada banco
    - registry: AdapterRegistry e UnknownBankPolicy
"""

from __future__ import annotations

from app.infra.banks.base import DEFAULT_LATENCY_SECONDS, SimulatedBankAdapter
from app.infra.banks.bb import BancoDoBrasilAdapter
from app.infra.banks.bradesco import BradescoAdapter
from app.infra.banks.itau import ItauAdapter
from app.infra.banks.registry import AdapterRegistry, UnknownBankPolicy

__all__ = [
    "DEFAULT_LATENCY_SECONDS",
    "AdapterRegistry",
    "BancoDoBrasilAdapter",
    "BradescoAdapter",
    "ItauAdapter",
    "SimulatedBankAdapter",
    "UnknownBankPolicy",
    "default_adapters",
]


def default_adapters(latency_seconds: float = DEFAULT_LATENCY_SECONDS) -> list[SimulatedBankAdapter]:
    """Adapters padrão na ordem exposta por supported-banks."""
    return [
        BradescoAdapter(latency_seconds),
        ItauAdapter(latency_seconds),
        BancoDoBrasilAdapter(latency_seconds),
    ]
