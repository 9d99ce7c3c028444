"""FlowStore em memória: padrão em desenvolvimento e testes.

Sem persistência entre reinícios. Entradas expiram por TTL: a leitura
descarta a entrada vencida e cada escrita varre as demais, então o
mapa não cresce indefinidamente.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from app.protocols.flow_store import DEFAULT_FLOW_TTL_SECONDS, FlowStoreProtocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.flow import FlowState


class MemoryFlowStore(FlowStoreProtocol):
    """FlowStore em memória com expiração por TTL.

    Args:
        clock: Fonte de tempo em segundos (injetável em testes).
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._store: dict[int, tuple[FlowState, float]] = {}  # proposal_id -> (state, expires_at)
        self._clock = clock

    def _cleanup_expired(self) -> None:
        now = self._clock()
        expired = [pid for pid, (_, expires_at) in self._store.items() if expires_at <= now]
        for pid in expired:
            del self._store[pid]

    def _get_live(self, proposal_id: int) -> FlowState | None:
        entry = self._store.get(proposal_id)
        if entry is None:
            return None
        state, expires_at = entry
        if self._clock() >= expires_at:
            del self._store[proposal_id]
            return None
        return state

    async def save_async(
        self,
        state: FlowState,
        ttl_seconds: int = DEFAULT_FLOW_TTL_SECONDS,
    ) -> None:
        self._cleanup_expired()
        self._store[state.proposal_id] = (state, self._clock() + ttl_seconds)

    async def load_async(self, proposal_id: int) -> FlowState | None:
        return self._get_live(proposal_id)

    async def delete_async(self, proposal_id: int) -> bool:
        return self._store.pop(proposal_id, None) is not None

    async def exists_async(self, proposal_id: int) -> bool:
        return self._get_live(proposal_id) is not None

    def __len__(self) -> int:
        """Entradas ainda não varridas (inclui vencidas ainda não lidas)."""
        return len(self._store)
