"""Registry de adapters de banco.

Resolve código de banco → adapter. Código desconhecido segue a
política configurada: fallback para o banco padrão (comportamento
histórico) ou rejeição com UnknownBankCodeError.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from config.logging import log_fallback
from utils.errors import UnknownBankCodeError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.protocols.bank_adapter import BankAdapterProtocol

logger = logging.getLogger(__name__)


class UnknownBankPolicy(StrEnum):
    """O que fazer com um código de banco não registrado."""

    FALLBACK_TO_DEFAULT = "fallback"
    REJECT = "reject"


class AdapterRegistry:
    """Mapa imutável de código de banco para adapter.

    Args:
        adapters: Adapters registrados (códigos únicos)
        default_bank_code: Código usado no fallback
        policy: Política para códigos desconhecidos
    """

    def __init__(
        self,
        adapters: Iterable[BankAdapterProtocol],
        default_bank_code: str,
        policy: UnknownBankPolicy = UnknownBankPolicy.FALLBACK_TO_DEFAULT,
    ) -> None:
        self._adapters: dict[str, BankAdapterProtocol] = {}
        for adapter in adapters:
            if adapter.bank_code in self._adapters:
                raise ValueError(f"Banco duplicado no registry: {adapter.bank_code}")
            self._adapters[adapter.bank_code] = adapter

        if default_bank_code not in self._adapters:
            raise ValueError(f"Banco padrão não registrado: {default_bank_code}")

        self._default_bank_code = default_bank_code
        self._policy = UnknownBankPolicy(policy)

    @property
    def default_bank_code(self) -> str:
        return self._default_bank_code

    @property
    def policy(self) -> UnknownBankPolicy:
        return self._policy

    def is_supported(self, bank_code: str) -> bool:
        return bank_code in self._adapters

    def supported_banks(self) -> list[str]:
        """Códigos suportados, na ordem de registro."""
        return list(self._adapters)

    def resolve(self, bank_code: str) -> BankAdapterProtocol:
        """Retorna o adapter do banco.

        Raises:
            UnknownBankCodeError: Código desconhecido com política REJECT
        """
        adapter = self._adapters.get(bank_code)
        if adapter is not None:
            return adapter

        if self._policy is UnknownBankPolicy.REJECT:
            raise UnknownBankCodeError(bank_code, self.supported_banks())

        log_fallback(
            logger,
            "adapter_registry",
            reason="unknown_bank_code",
            default_bank_code=self._default_bank_code,
        )
        logger.warning(
            "adapter_fallback_used",
            extra={
                "requested_bank_code": bank_code,
                "bank_code": self._default_bank_code,
            },
        )
        return self._adapters[self._default_bank_code]
