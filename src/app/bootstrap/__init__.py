"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, inicializa
dependências e conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_authorization_flow_service

    # Na inicialização do serviço
    initialize_app()

    # Obter o orquestrador
    service = get_authorization_flow_service()
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import get_base_settings, get_flow_settings
from fsm import validate_transition_map

if TYPE_CHECKING:
    from app.infra.banks import AdapterRegistry
    from app.protocols.flow_store import FlowStoreProtocol
    from app.protocols.proposal_lookup import ProposalLookupProtocol
    from app.services.authorization_flow import AuthorizationFlowService

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do serviço.
    """
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=get_base_settings().service_name,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes.

    Configura logging em nível DEBUG sem JSON para facilitar debug.
    """
    configure_logging(
        level="DEBUG",
        service_name=f"{get_base_settings().service_name}-test",
        correlation_id_getter=get_correlation_id,
        json_output=False,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    environment = base.environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"flow: {error}" for error in get_flow_settings().validate(base))
    errors.extend(f"fsm: {error}" for error in validate_transition_map())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_flow_store() -> FlowStoreProtocol:
    """Obtém o FlowStore (singleton)."""
    from app.bootstrap.dependencies import create_flow_store
    return create_flow_store()


@lru_cache(maxsize=1)
def get_adapter_registry() -> AdapterRegistry:
    """Obtém o registry de bancos (singleton)."""
    from app.bootstrap.dependencies import create_adapter_registry
    return create_adapter_registry()


@lru_cache(maxsize=1)
def get_proposal_lookup() -> ProposalLookupProtocol:
    """Obtém o lookup de propostas (singleton)."""
    from app.bootstrap.dependencies import create_proposal_lookup
    return create_proposal_lookup()


@lru_cache(maxsize=1)
def get_authorization_flow_service() -> AuthorizationFlowService:
    """Obtém o orquestrador do fluxo (singleton)."""
    from app.bootstrap.dependencies import create_authorization_flow_service
    return create_authorization_flow_service(
        flow_store=get_flow_store(),
        adapter_registry=get_adapter_registry(),
        proposal_lookup=get_proposal_lookup(),
    )
