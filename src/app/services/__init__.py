"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.authorization_flow import (
    AuthorizationFlowService,
    FlowProgressMode,
    build_summary,
    current_status_for,
)
from app.services.credit_validation import CreditValidationService, validate_proposal
from app.services.keyed_lock import KeyedLock

__all__ = [
    "AuthorizationFlowService",
    "CreditValidationService",
    "FlowProgressMode",
    "KeyedLock",
    "build_summary",
    "current_status_for",
    "validate_proposal",
]
