"""Observabilidade: correlation_id e métricas em logs estruturados.

Uso:
    from app.observability import correlation_scope, get_correlation_id
    from app.observability import record_latency, record_flow_transition
"""

from app.observability.correlation import (
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    normalize_correlation_id,
)
from app.observability.metrics import (
    record_bank_submission,
    record_flow_transition,
    record_latency,
)

__all__ = [
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "normalize_correlation_id",
    "record_bank_submission",
    "record_flow_transition",
    "record_latency",
]
