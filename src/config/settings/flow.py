"""Settings do fluxo de autorização de propostas.

Controla backend do FlowStore, latência simulada dos bancos,
política para códigos de banco desconhecidos e o modo de progresso
usado no polling de resumo.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

FlowStoreBackend = Literal["memory", "redis"]
ProgressMode = Literal["random", "bank_status"]
UnknownBankPolicyName = Literal["fallback", "reject"]

KNOWN_BANK_CODES = frozenset({"bradesco", "itau", "bb"})


@dataclass(frozen=True)
class FlowSettings:
    """Configurações do fluxo de autorização.

    Attributes:
        store_backend: Backend do FlowStore (memory|redis)
        state_ttl_seconds: TTL de cada FlowState no store
        bank_latency_seconds: Latência simulada de submissão aos bancos
        completion_threshold: Sorteio acima deste valor conclui o fluxo
            em aguardo (0.6 = 40% de chance por consulta)
        progress_mode: Origem da decisão de avanço no resumo
        unknown_bank_policy: fallback (banco padrão) ou reject
        default_bank_code: Banco usado no fallback
    """

    store_backend: FlowStoreBackend = "memory"
    state_ttl_seconds: int = 86400  # 24h
    bank_latency_seconds: float = 1.5
    completion_threshold: float = 0.6
    progress_mode: ProgressMode = "random"
    unknown_bank_policy: UnknownBankPolicyName = "fallback"
    default_bank_code: str = "bradesco"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações do fluxo.

        Args:
            base: BaseSettings para checar ambiente e REDIS_URL.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.store_backend not in {"memory", "redis"}:
            errors.append(f"FLOW_STORE_BACKEND inválido: {self.store_backend}")

        if self.store_backend == "memory" and not base.is_development:
            errors.append("FLOW_STORE_BACKEND=memory proibido em staging/production")

        if self.store_backend == "redis" and not base.redis_url:
            errors.append("FLOW_STORE_BACKEND=redis requer REDIS_URL configurado")

        if self.state_ttl_seconds <= 0:
            errors.append("FLOW_STATE_TTL_SECONDS deve ser > 0")

        if self.bank_latency_seconds < 0:
            errors.append("BANK_SIMULATED_LATENCY_SECONDS deve ser >= 0")

        if not 0.0 <= self.completion_threshold <= 1.0:
            errors.append("FLOW_COMPLETION_THRESHOLD deve estar entre 0.0 e 1.0")

        if self.progress_mode not in {"random", "bank_status"}:
            errors.append(f"FLOW_PROGRESS_MODE inválido: {self.progress_mode}")

        if self.unknown_bank_policy not in {"fallback", "reject"}:
            errors.append(f"UNKNOWN_BANK_POLICY inválido: {self.unknown_bank_policy}")

        if self.default_bank_code not in KNOWN_BANK_CODES:
            errors.append(f"DEFAULT_BANK_CODE desconhecido: {self.default_bank_code}")

        return errors


def _load_flow_from_env() -> FlowSettings:
    backend_str = os.getenv("FLOW_STORE_BACKEND", "memory").lower()
    backend: FlowStoreBackend = backend_str if backend_str in ("memory", "redis") else "memory"

    mode_str = os.getenv("FLOW_PROGRESS_MODE", "random").lower()
    mode: ProgressMode = mode_str if mode_str in ("random", "bank_status") else "random"

    policy_str = os.getenv("UNKNOWN_BANK_POLICY", "fallback").lower()
    policy: UnknownBankPolicyName = policy_str if policy_str in ("fallback", "reject") else "fallback"

    return FlowSettings(
        store_backend=backend,
        state_ttl_seconds=int(os.getenv("FLOW_STATE_TTL_SECONDS", "86400")),
        bank_latency_seconds=float(os.getenv("BANK_SIMULATED_LATENCY_SECONDS", "1.5")),
        completion_threshold=float(os.getenv("FLOW_COMPLETION_THRESHOLD", "0.6")),
        progress_mode=mode,
        unknown_bank_policy=policy,
        default_bank_code=os.getenv("DEFAULT_BANK_CODE", "bradesco").lower(),
    )


@lru_cache(maxsize=1)
def get_flow_settings() -> FlowSettings:
    """Retorna instância cacheada de FlowSettings."""
    return _load_flow_from_env()
