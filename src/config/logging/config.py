"""Configuração centralizada de logging do fluxo de autorização.

Configura logging estruturado JSON com:
- Campos obrigatórios (correlation_id, service, level, logger, message)
- Saída texto opcional para execução local
- Níveis configuráveis por ambiente

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização do serviço (app/bootstrap/)
    configure_logging(level="INFO", service_name="fluxo-autorizacao")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("flow_started", extra={"proposal_id": 42, "bank_code": "itau"})

Logs estruturados, sem PII (nunca CPF, email ou nome do cliente).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter, create_text_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "fluxo-autorizacao"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
    *,
    json_output: bool = True,
) -> None:
    """Configura o root logger do serviço.

    Deve ser chamada uma vez na inicialização (app/bootstrap/).

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id
            do contexto atual (ContextVar de app/observability).
        json_output: False usa formato texto legível (testes/dev local).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    formatter = create_json_formatter() if json_output else create_text_formatter()

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substitui handlers existentes para evitar duplicação
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo (geralmente __name__)."""
    return logging.getLogger(name)


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    **fields: str | int | float,
) -> None:
    """Registra que um fallback determinístico foi aplicado.

    Usado, por exemplo, quando um código de banco desconhecido é
    resolvido para o adapter padrão.

    Args:
        logger: Logger do módulo chamador.
        component: Componente que aplicou o fallback (ex: "adapter_registry").
        reason: Motivo curto, sem PII (ex: "unknown_bank_code").
        **fields: Campos extras seguros para log.
    """
    extra: dict[str, object] = {
        "fallback_used": True,
        "component": component,
    }
    if reason:
        extra["reason"] = reason
    extra.update(fields)

    logger.info(
        "Fallback applied for %s",
        component,
        extra=extra,
    )
