"""Protocolo de persistência de FlowState (mapa proposta → estado do fluxo)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.flow import FlowState

DEFAULT_FLOW_TTL_SECONDS = 86400


class FlowStoreProtocol(ABC):
    """Contrato assíncrono do FlowStore.

    Único recurso mutável compartilhado do fluxo. Implementações não
    precisam de controle de concorrência: o orquestrador serializa
    leitura → decisão → escrita por proposta.
    """

    @abstractmethod
    async def save_async(
        self,
        state: FlowState,
        ttl_seconds: int = DEFAULT_FLOW_TTL_SECONDS,
    ) -> None: ...

    @abstractmethod
    async def load_async(self, proposal_id: int) -> FlowState | None: ...

    @abstractmethod
    async def delete_async(self, proposal_id: int) -> bool: ...

    @abstractmethod
    async def exists_async(self, proposal_id: int) -> bool: ...

    async def ping_async(self) -> bool:
        """Checagem de disponibilidade para readiness."""
        return True
