"""Stores: implementações concretas do FlowStore.

Módulos disponíveis:
    - memory_flow_store: FlowStore em memória com TTL (dev/test)
    - redis_flow_store: FlowStore usando Redis
"""

from __future__ import annotations

from app.infra.stores.memory_flow_store import MemoryFlowStore
from app.infra.stores.redis_flow_store import RedisFlowStore

__all__ = [
    "MemoryFlowStore",
    "RedisFlowStore",
]
