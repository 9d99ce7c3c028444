"""Registro de métricas via structured logging.

Métricas básicas para observabilidade do fluxo de autorização.

As métricas são registradas como logs estruturados e podem ser agregadas
posteriormente por sistemas como BigQuery, CloudWatch Insights, etc.

Métricas suportadas:
- Latência: histogram de tempos de execução por componente/operação
- Transição: counter de mudanças de etapa do fluxo por gatilho
- Submissão: counter de submissões a bancos por resultado

Uso:
    from app.observability.metrics import record_latency, record_flow_transition

    start = time.perf_counter()
    # ... operação ...
    latency_ms = (time.perf_counter() - start) * 1000
    record_latency("authorization_flow", "start", latency_ms, correlation_id)

    record_flow_transition(42, "awaiting_response", "completed", "poll")
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "authorization_flow")
        operation: Nome da operação (ex: "start", "get_summary")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_flow_transition(
    proposal_id: int,
    from_step: str | None,
    to_step: str,
    trigger: str,
    correlation_id: str | None = None,
) -> None:
    """Registra mudança de etapa do fluxo.

    Args:
        proposal_id: Proposta cujo fluxo mudou
        from_step: Etapa anterior (None = não iniciado)
        to_step: Nova etapa
        trigger: Gatilho (ex: "validation", "bank_submission", "poll", "cancel")
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_flow_transition",
        extra={
            "metric_type": "flow_transition",
            "component": "authorization_flow",
            "proposal_id": proposal_id,
            "from_step": from_step or "not_started",
            "to_step": to_step,
            "trigger": trigger,
            "correlation_id": correlation_id,
        },
    )


def record_bank_submission(
    bank_code: str,
    success: bool,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra submissão de proposta a um banco."""
    logger.info(
        "metric_bank_submission",
        extra={
            "metric_type": "bank_submission",
            "component": "bank_adapter",
            "bank_code": bank_code,
            "success": success,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )
