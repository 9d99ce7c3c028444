"""Factories de dependências: criação de implementações concretas.

Este módulo centraliza a criação de stores, registry de bancos e do
orquestrador a partir das settings de ambiente.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_async_redis_client
from app.infra.banks import AdapterRegistry, UnknownBankPolicy, default_adapters
from app.infra.proposals import MemoryProposalLookup
from app.infra.stores import MemoryFlowStore, RedisFlowStore
from app.services.authorization_flow import AuthorizationFlowService
from config.settings import get_base_settings, get_flow_settings

if TYPE_CHECKING:
    from app.protocols.flow_store import FlowStoreProtocol
    from app.protocols.proposal_lookup import ProposalLookupProtocol
    from config.settings import FlowSettings

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Flow Store Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_flow_store(settings: FlowSettings | None = None) -> FlowStoreProtocol:
    """Cria FlowStore baseado na configuração.

    Lê FLOW_STORE_BACKEND:
    - "memory": MemoryFlowStore (dev/test)
    - "redis": RedisFlowStore (staging/production)
    """
    flow_settings = settings or get_flow_settings()
    backend = flow_settings.store_backend

    if backend == "redis":
        store: FlowStoreProtocol = RedisFlowStore(create_async_redis_client())
        logger.info("flow_store_created", extra={"backend": "redis"})
        return store

    if backend == "memory":
        environment = get_base_settings().environment
        if environment != "development":
            logger.warning(
                "memory_store_in_non_dev",
                extra={"backend": "memory", "environment": environment},
            )
        store = MemoryFlowStore()
        logger.info("flow_store_created", extra={"backend": "memory"})
        return store

    msg = f"FLOW_STORE_BACKEND inválido: {backend}"
    raise ValueError(msg)


# ──────────────────────────────────────────────────────────────────────────────
# Bancos e propostas
# ──────────────────────────────────────────────────────────────────────────────


def create_adapter_registry(settings: FlowSettings | None = None) -> AdapterRegistry:
    """Cria o registry com os bancos simulados."""
    flow_settings = settings or get_flow_settings()
    registry = AdapterRegistry(
        default_adapters(flow_settings.bank_latency_seconds),
        default_bank_code=flow_settings.default_bank_code,
        policy=UnknownBankPolicy(flow_settings.unknown_bank_policy),
    )
    logger.info(
        "adapter_registry_created",
        extra={
            "banks": registry.supported_banks(),
            "default_bank_code": registry.default_bank_code,
            "policy": registry.policy.value,
        },
    )
    return registry


def create_proposal_lookup() -> ProposalLookupProtocol:
    """Cria o lookup de propostas (mock em memória)."""
    return MemoryProposalLookup()


# ──────────────────────────────────────────────────────────────────────────────
# Orquestrador
# ──────────────────────────────────────────────────────────────────────────────


def create_authorization_flow_service(
    *,
    flow_store: FlowStoreProtocol,
    adapter_registry: AdapterRegistry,
    proposal_lookup: ProposalLookupProtocol,
    settings: FlowSettings | None = None,
) -> AuthorizationFlowService:
    """Conecta o orquestrador às dependências concretas."""
    flow_settings = settings or get_flow_settings()
    return AuthorizationFlowService(
        flow_store=flow_store,
        adapter_registry=adapter_registry,
        proposal_lookup=proposal_lookup,
        completion_threshold=flow_settings.completion_threshold,
        progress_mode=flow_settings.progress_mode,
        state_ttl_seconds=flow_settings.state_ttl_seconds,
    )
